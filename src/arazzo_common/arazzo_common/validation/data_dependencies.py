# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

from typing import Any, Dict, List, Set, Tuple

from ..expressions import (
    InputReference,
    RuntimeExpression,
    StepOutputReference,
    collect_expressions,
)
from ..spec.arazzo import ArazzoSpec, Step, Workflow
from ..spec.resolver import OpenApiResolver
from .findings import ErrorType, ValidationError, ValidationWarning


def step_expressions(step: Step) -> List[RuntimeExpression]:
    """Expressions in a step's parameters, request body and success criteria.

    Repeated expressions are reported once, in first-seen order.
    """
    values: List[Any] = [p.value for p in step.parameters]
    if step.request_body is not None:
        values.append(step.request_body.payload)
        values.append(step.request_body.replacements)
    for criterion in step.success_criteria or []:
        values.extend([criterion.context, criterion.condition, criterion.value])

    unique: Dict[Any, RuntimeExpression] = {}
    for expr in collect_expressions(values):
        unique.setdefault((type(expr), expr), expr)
    return list(unique.values())


class DataDependencyValidator:
    """Checks ``$steps`` / ``$inputs`` references against step order and inputs."""

    def __init__(self, arazzo: ArazzoSpec, resolver: OpenApiResolver):
        self.arazzo = arazzo
        self.resolver = resolver

    def _validate_workflow(
        self, workflow: Workflow, errors: List[ValidationError], warnings: List[ValidationWarning]
    ) -> None:
        positions = {step.step_id: i for i, step in enumerate(workflow.steps)}
        used: Set[str] = set()

        for i, step in enumerate(workflow.steps):
            context = dict(workflow_id=workflow.workflow_id, step_id=step.step_id)
            for expr in step_expressions(step):
                if isinstance(expr, StepOutputReference):
                    position = positions.get(expr.step_id)
                    if position is None:
                        errors.append(
                            ValidationError(
                                ErrorType.InvalidStepReference,
                                f"Invalid step reference: $steps.{expr.step_id}.outputs.{expr.path} "
                                f"refers to non-existent step '{expr.step_id}'",
                                **context,
                            )
                        )
                    elif position >= i:
                        errors.append(
                            ValidationError(
                                ErrorType.StepOrderViolation,
                                f"Step order violation: step '{step.step_id}' references outputs from "
                                f"step '{expr.step_id}' which comes after it in execution order",
                                **context,
                            )
                        )
                    else:
                        used.add(expr.step_id)
                elif isinstance(expr, InputReference) and workflow.inputs is None:
                    warnings.append(
                        ValidationWarning(
                            f"Input reference $inputs.{expr.path} used but workflow does not define inputs",
                            **context,
                        )
                    )

        # Workflow outputs are read after every step has run
        for expr in collect_expressions(workflow.outputs):
            if isinstance(expr, StepOutputReference) and expr.step_id in positions:
                used.add(expr.step_id)

        for step in workflow.steps:
            if step.outputs and step.step_id not in used:
                warnings.append(
                    ValidationWarning(
                        "Unused output: step defines outputs but they are never referenced by subsequent steps",
                        workflow_id=workflow.workflow_id,
                        step_id=step.step_id,
                    )
                )

    def validate(self) -> Tuple[List[ValidationError], List[ValidationWarning]]:
        errors: List[ValidationError] = []
        warnings: List[ValidationWarning] = []
        for workflow in self.arazzo.workflows:
            self._validate_workflow(workflow, errors, warnings)
        return errors, warnings
