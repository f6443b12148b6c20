# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from .arazzo import (
    Action,
    ArazzoSpec,
    FailureAction,
    Info,
    Parameter,
    RequestBody,
    SourceDescription,
    Step,
    SuccessAction,
    SuccessCriterion,
    Workflow,
)
from .exceptions import SpecLoadError
from .loader import (
    SourceDescriptionResolver,
    SourceLoadError,
    SourceLoadResult,
    dump_arazzo,
    load_arazzo,
    load_openapi,
    parse_arazzo,
    parse_openapi,
    save_arazzo,
)
from .openapi import OpenApiDocument, Operation, OperationParameter, PathItem
from .resolver import OpenApiResolver, OperationRef

__all__ = [
    "Action",
    "ArazzoSpec",
    "FailureAction",
    "Info",
    "OpenApiDocument",
    "OpenApiResolver",
    "Operation",
    "OperationParameter",
    "OperationRef",
    "Parameter",
    "PathItem",
    "RequestBody",
    "SourceDescription",
    "SourceDescriptionResolver",
    "SourceLoadError",
    "SourceLoadResult",
    "SpecLoadError",
    "Step",
    "SuccessAction",
    "SuccessCriterion",
    "Workflow",
    "dump_arazzo",
    "load_arazzo",
    "load_openapi",
    "parse_arazzo",
    "parse_openapi",
    "save_arazzo",
]
