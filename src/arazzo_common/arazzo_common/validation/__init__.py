# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Arazzo / OpenAPI consistency validation.

Public API
----------
ArazzoOpenApiValidator      Run the four validation phases over a document.
validate_consistency        Functional shorthand for the above.
OperationValidator          Phase 1: operationId / operationPath / workflowId references.
ParameterValidator          Phase 2: step parameters vs. operation parameters.
DataDependencyValidator     Phase 3: $steps / $inputs references and step order.
SchemaValidator             Phase 4: payload schemas (reports nothing yet).
ErrorType                   Classification of a ValidationError.
extract_line_map            Map YAML key-paths to 1-based source line numbers.
extract_spec_positions      Locate workflows and steps by id.
annotate_with_line_numbers  Attach file / line to every finding.
suggest                     Return edit-distance suggestions for a misspelled reference.
"""

from .consistency import ArazzoOpenApiValidator, validate_consistency
from .data_dependencies import DataDependencyValidator, step_expressions
from .findings import ConsistencyValidationResult, ErrorType, ValidationError, ValidationWarning
from .line_tracker import (
    SpecPositions,
    annotate_with_line_numbers,
    extract_line_map,
    extract_spec_positions,
    line_for,
)
from .operations import OperationValidator
from .parameters import ParameterValidator
from .schemas import SchemaValidator
from .suggestions import suggest

__all__ = [
    "ArazzoOpenApiValidator",
    "ConsistencyValidationResult",
    "DataDependencyValidator",
    "ErrorType",
    "OperationValidator",
    "ParameterValidator",
    "SchemaValidator",
    "SpecPositions",
    "ValidationError",
    "ValidationWarning",
    "annotate_with_line_numbers",
    "extract_line_map",
    "extract_spec_positions",
    "line_for",
    "step_expressions",
    "suggest",
    "validate_consistency",
]
