# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Build a :class:`FlowGraph` from an Arazzo workflow.

Edges produced, in this order:

- Sequential: each step to the next, unless the step branches with ``goto``.
- DataDependency: referenced step to dependent step (opt-in).
- Conditional: a self-loop on every step with success criteria (opt-out).
- OnSuccess / OnFailure: one per ``goto`` action naming a step of the workflow.
"""

from typing import Dict, List, Optional, Union

from ..constants import ACTION_GOTO, HTTP_METHODS
from ..expressions import StepOutputReference, collect_expressions
from ..spec.arazzo import Step, Workflow
from ..spec.openapi import OpenApiDocument
from ..spec.resolver import OpenApiResolver, split_operation_id, split_operation_path
from .model import FlowEdge, FlowGraph, FlowNode

InterfaceDocument = Union[OpenApiDocument, OpenApiResolver]


def step_data_dependencies(step: Step) -> Dict[str, List[str]]:
    """Return referenced step id -> expressions, for parameters and request body.

    Keys keep first-seen order.
    """
    found: Dict[str, List[str]] = {}
    exprs = []
    for param in step.parameters:
        exprs.extend(collect_expressions(param.value))
    if step.request_body is not None:
        exprs.extend(collect_expressions(step.request_body.payload))
    for expr in exprs:
        if isinstance(expr, StepOutputReference):
            found.setdefault(expr.step_id, []).append(expr.raw)
    return found


def _has_goto(step: Step) -> bool:
    return any(action.action_type == ACTION_GOTO for action in step.actions())


class FlowGraphBuilder:
    def __init__(
        self,
        workflow: Workflow,
        openapi: Optional[InterfaceDocument] = None,
        conditional_self_loops: bool = True,
        data_dependency_edges: bool = False,
    ):
        self.workflow = workflow
        self.openapi = openapi
        self.conditional_self_loops = conditional_self_loops
        self.data_dependency_edges = data_dependency_edges

    def resolve_method(self, step: Step) -> Optional[str]:
        if step.operation_path is not None:
            parts = split_operation_path(step.operation_path)
            return parts[0] if parts is not None else None
        if step.operation_id is None or self.openapi is None:
            return None

        source, operation_id = split_operation_id(step.operation_id)
        if isinstance(self.openapi, OpenApiResolver):
            docs = [
                doc for name, doc in self.openapi.get_all_specs().items()
                if source is None or name == source
            ]
        else:
            docs = [self.openapi]

        for doc in docs:
            hit = doc.find_operation(operation_id, HTTP_METHODS)
            if hit is not None:
                return hit[1]
        return None

    def build(self) -> FlowGraph:
        graph = FlowGraph(self.workflow.workflow_id)
        steps = self.workflow.steps

        indices = [
            graph.add_node(
                FlowNode(
                    step_id=step.step_id,
                    operation_id=step.operation_id,
                    operation_path=step.operation_path,
                    method=self.resolve_method(step),
                    description=step.description,
                    has_outputs=bool(step.outputs),
                    has_success_criteria=bool(step.success_criteria),
                )
            )
            for step in steps
        ]

        for i in range(len(steps) - 1):
            if not _has_goto(steps[i]):
                graph.add_edge(indices[i], indices[i + 1], FlowEdge.sequential())

        for i, step in enumerate(steps):
            deps = step_data_dependencies(step)
            graph.data_dependencies[step.step_id] = list(deps)
            if not self.data_dependency_edges:
                continue
            for dep_id, refs in deps.items():
                source = graph.get_node_index(dep_id)
                if source is None:
                    continue
                for ref in dict.fromkeys(refs):
                    graph.add_edge(source, indices[i], FlowEdge.data_dependency(ref))

        if self.conditional_self_loops:
            for i, step in enumerate(steps):
                if step.success_criteria:
                    description = f"Success criteria: {len(step.success_criteria)} conditions"
                    graph.add_edge(indices[i], indices[i], FlowEdge.conditional(description))

        for i, step in enumerate(steps):
            for actions, factory in ((step.on_success, FlowEdge.on_success), (step.on_failure, FlowEdge.on_failure)):
                for action in actions or []:
                    if action.action_type != ACTION_GOTO:
                        continue
                    target_id = action.target_step_id
                    target = graph.get_node_index(target_id) if target_id is not None else None
                    if target is not None:
                        graph.add_edge(indices[i], target, factory(action.name))

        return graph


def build_flow_graph(
    workflow: Workflow,
    openapi: Optional[InterfaceDocument] = None,
    *,
    conditional_self_loops: bool = True,
    data_dependency_edges: bool = False,
) -> FlowGraph:
    return FlowGraphBuilder(
        workflow,
        openapi,
        conditional_self_loops=conditional_self_loops,
        data_dependency_edges=data_dependency_edges,
    ).build()
