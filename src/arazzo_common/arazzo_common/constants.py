# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from typing import Final, Tuple

# Methods scanned when resolving an operationId to its HTTP method. The
# builder stops at the first match, so the order is significant.
HTTP_METHODS: Final[Tuple[str, ...]] = (
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "PATCH",
    "HEAD",
    "OPTIONS",
)

# The resolver also looks at TRACE, which the graph builder never reports.
OPENAPI_METHODS: Final[Tuple[str, ...]] = HTTP_METHODS + ("TRACE",)

PARAMETER_LOCATIONS: Final[Tuple[str, ...]] = ("query", "header", "path", "cookie")

ACTION_GOTO: Final[str] = "goto"
ACTION_END: Final[str] = "end"
ACTION_RETRY: Final[str] = "retry"

SOURCE_TYPE_OPENAPI: Final[str] = "openapi"
SOURCE_DESCRIPTIONS_PREFIX: Final[str] = "$sourceDescriptions."
COMPONENT_PARAMETERS_PREFIX: Final[str] = "$components.parameters."

SUPPORTED_ARAZZO_MAJOR: Final[str] = "1."
SUPPORTED_OPENAPI_VERSIONS: Final[Tuple[str, ...]] = ("3.0", "3.1")

DEFAULT_SUGGESTION_CUTOFF: Final[float] = 0.6
