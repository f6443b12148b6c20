# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from typing import List, Tuple

from ..spec.arazzo import ArazzoSpec
from ..spec.resolver import OpenApiResolver
from .findings import ValidationError, ValidationWarning


class SchemaValidator:
    """Request / response payloads against their JSON schemas.

    Reports nothing: comparing payloads with schemas needs ``$ref`` resolution
    across documents, which this package does not do.
    """

    def __init__(self, arazzo: ArazzoSpec, resolver: OpenApiResolver):
        self.arazzo = arazzo
        self.resolver = resolver

    def validate(self) -> Tuple[List[ValidationError], List[ValidationWarning]]:
        return [], []
