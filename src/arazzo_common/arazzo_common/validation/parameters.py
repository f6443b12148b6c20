# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from typing import List, Optional, Tuple

from ..expressions import is_runtime_expression
from ..spec.arazzo import ArazzoSpec, Parameter
from ..spec.openapi import OperationParameter
from ..spec.resolver import OpenApiResolver
from .findings import ErrorType, ValidationError, ValidationWarning
from .operations import OperationValidator


def _matches(step_param: Parameter, op_param: OperationParameter) -> bool:
    # A step parameter without `in` matches on name alone
    return step_param.name == op_param.name and step_param.location in (None, op_param.location)


def _misplaced(step_param: Parameter, op_params: List[OperationParameter]) -> Optional[OperationParameter]:
    if any(_matches(step_param, p) for p in op_params):
        return None
    for op_param in op_params:
        if op_param.name == step_param.name:
            return op_param
    return None


class ParameterValidator:
    """Compares each step's parameters with those its operation declares."""

    def __init__(self, arazzo: ArazzoSpec, resolver: OpenApiResolver):
        self.arazzo = arazzo
        self.resolver = resolver

    def validate(self) -> Tuple[List[ValidationError], List[ValidationWarning]]:
        errors: List[ValidationError] = []
        warnings: List[ValidationWarning] = []
        operations = OperationValidator(self.arazzo, self.resolver)

        for workflow in self.arazzo.workflows:
            for step in workflow.steps:
                if step.workflow_id is not None:
                    continue
                ref = operations.get_operation_from_step(step)
                if ref is None:
                    continue
                op_params = ref.operation.parameters
                context = dict(workflow_id=workflow.workflow_id, step_id=step.step_id)

                misplaced = {}
                for step_param in step.parameters:
                    op_param = _misplaced(step_param, op_params)
                    if op_param is not None:
                        misplaced[op_param.key] = step_param

                for op_param in op_params:
                    if not op_param.required or op_param.key in misplaced:
                        continue
                    if not any(_matches(p, op_param) for p in step.parameters):
                        errors.append(
                            ValidationError(
                                ErrorType.RequiredParameterMissing,
                                f"Required parameter missing: '{op_param.name}' (in: {op_param.location}) "
                                "is required by OpenAPI but not provided in step",
                                source_name=ref.source_name,
                                **context,
                            )
                        )

                for step_param in step.parameters:
                    op_param = _misplaced(step_param, op_params)
                    if op_param is not None:
                        errors.append(
                            ValidationError(
                                ErrorType.ParameterLocationMismatch,
                                f"Parameter location mismatch: '{step_param.name}' is defined as "
                                f"'in: {op_param.location}' in OpenAPI but provided as "
                                f"'in: {step_param.location}' in step",
                                source_name=ref.source_name,
                                **context,
                            )
                        )
                        continue
                    if any(_matches(step_param, p) for p in op_params):
                        continue
                    if is_runtime_expression(step_param.value):
                        continue
                    warnings.append(
                        ValidationWarning(
                            f"Extra parameter: '{step_param.name}' (in: {step_param.location or 'unspecified'}) "
                            "is not defined in OpenAPI operation",
                            **context,
                        )
                    )

        return errors, warnings
