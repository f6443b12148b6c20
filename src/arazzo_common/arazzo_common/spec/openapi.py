# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Typed view of the parts of an OpenAPI 3.0 / 3.1 document that workflows use."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..constants import OPENAPI_METHODS
from .exceptions import SpecLoadError

_COMPONENT_PARAMETER_PREFIX = "#/components/parameters/"


@dataclass
class OperationParameter:
    name: str
    location: str
    required: bool = False
    description: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return self.name, self.location


@dataclass
class Operation:
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: List[OperationParameter] = field(default_factory=list)
    request_body: Optional[Dict[str, Any]] = None
    responses: Dict[str, Any] = field(default_factory=dict)

    def get_parameter(self, name: str, location: Optional[str] = None) -> Optional[OperationParameter]:
        for param in self.parameters:
            if param.name == name and (location is None or param.location == location):
                return param
        return None


@dataclass
class PathItem:
    operations: Dict[str, Operation] = field(default_factory=dict)
    parameters: List[OperationParameter] = field(default_factory=list)

    def get_operation(self, method: str) -> Optional[Operation]:
        return self.operations.get(method.upper())


@dataclass
class OpenApiDocument:
    openapi: str
    title: str = ""
    version: str = ""
    paths: Dict[str, PathItem] = field(default_factory=dict)
    components: Dict[str, Any] = field(default_factory=dict)

    def iter_operations(self, methods=OPENAPI_METHODS) -> Iterator[Tuple[str, str, Operation]]:
        """Yield ``(path, METHOD, operation)`` in document order.

        Paths are visited in order; within a path, methods follow *methods*.
        """
        for path, item in self.paths.items():
            for method in methods:
                operation = item.operations.get(method)
                if operation is not None:
                    yield path, method, operation

    def find_operation(self, operation_id: str, methods=OPENAPI_METHODS) -> Optional[Tuple[str, str, Operation]]:
        for path, method, operation in self.iter_operations(methods):
            if operation.operation_id == operation_id:
                return path, method, operation
        return None

    def get_operation(self, path: str, method: str) -> Optional[Operation]:
        item = self.paths.get(path)
        if item is None:
            return None
        return item.get_operation(method)

    def operation_ids(self) -> List[str]:
        return [op.operation_id for _, _, op in self.iter_operations() if op.operation_id]

    @classmethod
    def from_dict(cls, data: Any) -> "OpenApiDocument":
        if not isinstance(data, dict):
            raise SpecLoadError(f"OpenAPI document must be a mapping, got {type(data).__name__}")
        if "openapi" not in data:
            raise SpecLoadError("Missing required field 'openapi' in OpenAPI document")
        info = data.get("info") or {}
        components = data.get("components") or {}
        raw_paths = data.get("paths") or {}
        if not isinstance(raw_paths, dict):
            raise SpecLoadError("OpenAPI 'paths' must be a mapping")

        paths: Dict[str, PathItem] = {}
        for path, raw_item in raw_paths.items():
            if not isinstance(raw_item, dict):
                continue
            paths[str(path)] = _parse_path_item(raw_item, components)

        return cls(
            openapi=str(data["openapi"]),
            title=str(info.get("title", "")),
            version=str(info.get("version", "")),
            paths=paths,
            components=components,
        )


def _resolve_parameter(raw: Any, components: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    ref = raw.get("$ref")
    if ref is None:
        return raw
    if not isinstance(ref, str) or not ref.startswith(_COMPONENT_PARAMETER_PREFIX):
        # Remote and non-parameter references are out of reach
        return None
    name = ref[len(_COMPONENT_PARAMETER_PREFIX):]
    target = (components.get("parameters") or {}).get(name)
    return target if isinstance(target, dict) else None


def _parse_parameters(raw_list: Any, components: Dict[str, Any]) -> List[OperationParameter]:
    params: List[OperationParameter] = []
    if not isinstance(raw_list, list):
        return params
    for raw in raw_list:
        resolved = _resolve_parameter(raw, components)
        if resolved is None or "name" not in resolved or "in" not in resolved:
            continue
        params.append(
            OperationParameter(
                name=str(resolved["name"]),
                location=str(resolved["in"]),
                # Only an explicit `required: true` counts
                required=resolved.get("required") is True,
                description=resolved.get("description"),
            )
        )
    return params


def _parse_path_item(raw_item: Dict[str, Any], components: Dict[str, Any]) -> PathItem:
    shared = _parse_parameters(raw_item.get("parameters"), components)
    operations: Dict[str, Operation] = {}
    for key, raw_op in raw_item.items():
        method = str(key).upper()
        if method not in OPENAPI_METHODS or not isinstance(raw_op, dict):
            continue
        own = _parse_parameters(raw_op.get("parameters"), components)
        own_keys = {p.key for p in own}
        merged = own + [p for p in shared if p.key not in own_keys]
        operations[method] = Operation(
            operation_id=raw_op.get("operationId"),
            summary=raw_op.get("summary"),
            description=raw_op.get("description"),
            parameters=merged,
            request_body=raw_op.get("requestBody"),
            responses=raw_op.get("responses") or {},
        )
    return PathItem(operations=operations, parameters=shared)
