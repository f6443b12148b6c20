# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from typing import List, Optional, Tuple

from ..constants import DEFAULT_SUGGESTION_CUTOFF
from ..spec.arazzo import ArazzoSpec, Step
from ..spec.resolver import OpenApiResolver, OperationRef, split_operation_id, split_operation_path
from .findings import ErrorType, ValidationError, ValidationWarning
from .suggestions import suggest


class OperationValidator:
    """Checks that every step's operation reference points at something real."""

    def __init__(
        self,
        arazzo: ArazzoSpec,
        resolver: OpenApiResolver,
        suggestion_cutoff: float = DEFAULT_SUGGESTION_CUTOFF,
    ):
        self.arazzo = arazzo
        self.resolver = resolver
        self.suggestion_cutoff = suggestion_cutoff

    def get_operation_from_step(self, step: Step) -> Optional[OperationRef]:
        if step.operation_id is not None:
            return self.resolver.find_operation(step.operation_id)
        if step.operation_path is not None:
            parts = split_operation_path(step.operation_path)
            if parts is None:
                return None
            method, path = parts
            return self.resolver.find_operation_by_path(path, method)
        return None

    def _check_operation_id(self, workflow_id: str, step: Step) -> Optional[ValidationError]:
        operation_id = step.operation_id
        if self.resolver.find_operation(operation_id) is not None:
            return None

        source, bare_id = split_operation_id(operation_id)
        if source is not None:
            if self.resolver.get_spec(source) is None:
                message = (
                    f"Operation not found: operationId '{operation_id}' refers to unknown "
                    f"source '{source}'"
                )
                candidates = self.resolver.source_names()
                ref = source
            else:
                message = (
                    f"Operation not found: operationId '{bare_id}' does not exist in "
                    f"OpenAPI source '{source}'"
                )
                candidates = self.resolver.operation_ids(source)
                ref = bare_id
        else:
            message = (
                f"Operation not found: operationId '{operation_id}' does not exist in any OpenAPI source"
            )
            candidates = self.resolver.operation_ids()
            ref = operation_id

        return ValidationError(
            ErrorType.OperationIdNotFound,
            message,
            workflow_id=workflow_id,
            step_id=step.step_id,
            source_name=source,
            suggestion=suggest(ref, candidates, cutoff=self.suggestion_cutoff),
        )

    def _check_operation_path(self, workflow_id: str, step: Step) -> Optional[ValidationError]:
        if self.get_operation_from_step(step) is not None:
            return None
        parts = split_operation_path(step.operation_path)
        ref = f"{parts[0]} {parts[1]}" if parts is not None else step.operation_path
        return ValidationError(
            ErrorType.OperationPathNotFound,
            f"Operation not found: operationPath '{step.operation_path}' does not exist in any OpenAPI source",
            workflow_id=workflow_id,
            step_id=step.step_id,
            suggestion=suggest(ref, self.resolver.operation_paths(), cutoff=self.suggestion_cutoff),
        )

    def _check_workflow_ref(self, workflow_id: str, step: Step) -> Optional[ValidationError]:
        if self.arazzo.get_workflow(step.workflow_id) is not None:
            return None
        return ValidationError(
            ErrorType.WorkflowRefNotFound,
            f"Workflow reference not found: workflowId '{step.workflow_id}' does not exist in Arazzo spec",
            workflow_id=workflow_id,
            step_id=step.step_id,
            suggestion=suggest(
                step.workflow_id,
                [w.workflow_id for w in self.arazzo.workflows],
                cutoff=self.suggestion_cutoff,
            ),
        )

    def validate(self) -> Tuple[List[ValidationError], List[ValidationWarning]]:
        errors: List[ValidationError] = []
        for workflow in self.arazzo.workflows:
            for step in workflow.steps:
                if step.operation_id is not None:
                    error = self._check_operation_id(workflow.workflow_id, step)
                elif step.operation_path is not None:
                    error = self._check_operation_path(workflow.workflow_id, step)
                elif step.workflow_id is not None:
                    error = self._check_workflow_ref(workflow.workflow_id, step)
                else:
                    error = None
                if error is not None:
                    errors.append(error)
        return errors, []
