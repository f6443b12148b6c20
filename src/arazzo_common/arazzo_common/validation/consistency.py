# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Cross-validation of an Arazzo document against its OpenAPI sources.

Phases run in order:

1. operation references (errors here stop the run)
2. parameter compatibility
3. data dependencies and step ordering
4. payload schemas
"""

from ..constants import DEFAULT_SUGGESTION_CUTOFF
from ..spec.arazzo import ArazzoSpec
from ..spec.resolver import OpenApiResolver
from .data_dependencies import DataDependencyValidator
from .findings import ConsistencyValidationResult
from .operations import OperationValidator
from .parameters import ParameterValidator
from .schemas import SchemaValidator


class ArazzoOpenApiValidator:
    def __init__(
        self,
        arazzo: ArazzoSpec,
        resolver: OpenApiResolver,
        suggestion_cutoff: float = DEFAULT_SUGGESTION_CUTOFF,
    ):
        self.arazzo = arazzo
        self.resolver = resolver
        self.suggestion_cutoff = suggestion_cutoff

    def validate_all(self) -> ConsistencyValidationResult:
        result = ConsistencyValidationResult()

        result.extend(*OperationValidator(self.arazzo, self.resolver, self.suggestion_cutoff).validate())
        if result.errors:
            return result

        for phase in (ParameterValidator, DataDependencyValidator, SchemaValidator):
            result.extend(*phase(self.arazzo, self.resolver).validate())

        return result


def validate_consistency(
    arazzo: ArazzoSpec, resolver: OpenApiResolver, suggestion_cutoff: float = DEFAULT_SUGGESTION_CUTOFF
) -> ConsistencyValidationResult:
    return ArazzoOpenApiValidator(arazzo, resolver, suggestion_cutoff).validate_all()
