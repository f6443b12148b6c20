# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Arazzo runtime expression grammar.

Runtime expressions are ``$``-prefixed references that are resolved while a
workflow executes.  The forms understood here are::

    $inputs.<dotted.path>                     workflow input field
    $steps.<stepId>.outputs.<dotted.path>     output of a named step
    $response.body.<dotted.path>              current response body field
    $response.body#/json/pointer              (pointer form of the above)
    $response.header.<name>                   current response header
    $statusCode                               current response status code

Any other ``$`` form is kept as :class:`Unrecognized`; strings that do not
start with ``$`` are literals.  Parsing never raises.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

_INPUT_RE = re.compile(r"^\$inputs\.(?P<path>.+)$", re.DOTALL)
_STEP_OUTPUT_RE = re.compile(r"^\$steps\.(?P<step>[^.\s]+)\.outputs\.(?P<path>.+)$", re.DOTALL)
_RESPONSE_BODY_RE = re.compile(r"^\$response\.body(?:\.(?P<path>.+)|(?P<pointer>#.*))?$", re.DOTALL)
_RESPONSE_HEADER_RE = re.compile(r"^\$response\.header\.(?P<name>.+)$", re.DOTALL)
_STATUS_CODE = "$statusCode"

# An embedded expression starts with "$" followed by a letter; "$5.00" is text.
_EMBEDDED_RE = re.compile(r"\$[A-Za-z][A-Za-z0-9_\-.#/~]*")


@dataclass(frozen=True)
class InputReference:
    path: str
    raw: str = field(default="", compare=False, repr=False)


@dataclass(frozen=True)
class StepOutputReference:
    step_id: str
    path: str
    raw: str = field(default="", compare=False, repr=False)

    @property
    def output_name(self) -> str:
        """First segment of the path, i.e. the key in the step's ``outputs``."""
        return self.path.split(".", 1)[0]


@dataclass(frozen=True)
class ResponseBodyReference:
    path: str
    raw: str = field(default="", compare=False, repr=False)


@dataclass(frozen=True)
class ResponseHeaderReference:
    name: str
    raw: str = field(default="", compare=False, repr=False)


@dataclass(frozen=True)
class StatusCodeReference:
    raw: str = field(default=_STATUS_CODE, compare=False, repr=False)


@dataclass(frozen=True)
class Unrecognized:
    raw: str


RuntimeExpression = Union[
    InputReference,
    StepOutputReference,
    ResponseBodyReference,
    ResponseHeaderReference,
    StatusCodeReference,
    Unrecognized,
]


def is_runtime_expression(value: Any) -> bool:
    """Return True when *value* is a string written as a runtime expression."""
    return isinstance(value, str) and value.startswith("$")


def parse_expression(value: Any) -> Optional[RuntimeExpression]:
    """Classify a whole string as a runtime expression.

    Returns ``None`` for literals (non-strings and strings not starting with
    ``$``).  Unknown ``$`` forms come back as :class:`Unrecognized`.
    """
    if not is_runtime_expression(value):
        return None

    if value == _STATUS_CODE:
        return StatusCodeReference(raw=value)

    match = _INPUT_RE.match(value)
    if match:
        return InputReference(match.group("path"), raw=value)

    match = _STEP_OUTPUT_RE.match(value)
    if match:
        return StepOutputReference(match.group("step"), match.group("path"), raw=value)

    match = _RESPONSE_BODY_RE.match(value)
    if match:
        path = match.group("path") or match.group("pointer") or ""
        return ResponseBodyReference(path, raw=value)

    match = _RESPONSE_HEADER_RE.match(value)
    if match:
        return ResponseHeaderReference(match.group("name"), raw=value)

    return Unrecognized(value)


def extract_expressions(text: Any) -> List[RuntimeExpression]:
    """Return every runtime expression embedded in *text*, in order.

    Handles mixed strings such as ``"Bearer $steps.login.outputs.token"``,
    ``"/users/{$inputs.id}"`` and JSON-encoded payloads.
    """
    if not isinstance(text, str) or "$" not in text:
        return []

    found: List[RuntimeExpression] = []
    for match in _EMBEDDED_RE.finditer(text):
        # A sentence-ending dot is not part of the path
        token = match.group(0).rstrip(".")
        expr = parse_expression(token)
        if expr is not None:
            found.append(expr)
    return found


def collect_expressions(value: Any) -> List[RuntimeExpression]:
    """Walk nested mappings / lists and extract all embedded expressions."""
    found: List[RuntimeExpression] = []

    def walk(item: Any) -> None:
        if isinstance(item, str):
            found.extend(extract_expressions(item))
        elif isinstance(item, dict):
            for v in item.values():
                walk(v)
        elif isinstance(item, (list, tuple)):
            for v in item:
                walk(v)

    walk(value)
    return found
