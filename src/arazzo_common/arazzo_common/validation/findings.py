# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Classified findings produced by the consistency validator."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ErrorType(Enum):
    OperationIdNotFound = "OperationIdNotFound"
    OperationPathNotFound = "OperationPathNotFound"
    WorkflowRefNotFound = "WorkflowRefNotFound"
    RequiredParameterMissing = "RequiredParameterMissing"
    ParameterTypeMismatch = "ParameterTypeMismatch"
    ParameterLocationMismatch = "ParameterLocationMismatch"
    InvalidStepReference = "InvalidStepReference"
    StepOrderViolation = "StepOrderViolation"
    InvalidInputReference = "InvalidInputReference"
    InvalidResponseRefContext = "InvalidResponseRefContext"
    RequestBodySchemaMismatch = "RequestBodySchemaMismatch"
    ResponseSchemaMismatch = "ResponseSchemaMismatch"


def _location_parts(
    file_path: Optional[str],
    line_number: Optional[int],
    source_name: Optional[str],
    workflow_id: Optional[str],
    step_id: Optional[str],
) -> List[str]:
    parts: List[str] = []
    if file_path and line_number is not None:
        parts.append(f"{file_path}:{line_number}")
    elif file_path:
        parts.append(file_path)
    if source_name:
        parts.append(f"[source: {source_name}]")
    if workflow_id and step_id:
        parts.append(f"[workflow: {workflow_id}, step: {step_id}]")
    elif workflow_id:
        parts.append(f"[workflow: {workflow_id}]")
    elif step_id:
        parts.append(f"[step: {step_id}]")
    return parts


@dataclass
class ValidationError:
    error_type: ErrorType
    message: str
    workflow_id: Optional[str] = None
    step_id: Optional[str] = None
    source_name: Optional[str] = None
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    suggestion: Optional[str] = None

    def format(self) -> str:
        parts = _location_parts(
            self.file_path, self.line_number, self.source_name, self.workflow_id, self.step_id
        )
        parts.append(self.message)
        text = " ".join(parts)
        if self.suggestion:
            text += f". Did you mean {self.suggestion}?"
        return text

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationWarning:
    message: str
    workflow_id: Optional[str] = None
    step_id: Optional[str] = None
    file_path: Optional[str] = None
    line_number: Optional[int] = None

    def format(self) -> str:
        parts = _location_parts(self.file_path, self.line_number, None, self.workflow_id, self.step_id)
        parts.append(self.message)
        return " ".join(parts)

    def __str__(self) -> str:
        return self.format()


@dataclass
class ConsistencyValidationResult:
    is_valid: bool = True
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationWarning] = field(default_factory=list)

    def extend(self, errors: List[ValidationError], warnings: List[ValidationWarning]) -> None:
        self.errors.extend(errors)
        self.warnings.extend(warnings)
        self.is_valid = not self.errors

    def errors_of_type(self, error_type: ErrorType) -> List[ValidationError]:
        return [e for e in self.errors if e.error_type is error_type]
