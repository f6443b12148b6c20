# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Structural checks on a built flow graph.

Self-loops only mark a step as conditional, so every check here runs on the
graph with self-loops removed.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .model import FlowGraph


class TopologicalSortError(Exception):
    pass


@dataclass
class GraphValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def summary(self) -> str:
        if not self.is_valid:
            return f"Graph is invalid with {len(self.errors)} errors"
        if self.warnings:
            return f"Graph is valid with {len(self.warnings)} warnings"
        return "Graph is valid with no warnings"


class FlowGraphValidator:
    def __init__(self, graph: FlowGraph):
        self.graph = graph
        self._adjacency: Dict[int, List[int]] = {i: [] for i in range(graph.node_count())}
        self._in_degree: Dict[int, int] = {i: 0 for i in range(graph.node_count())}
        for src, dst, _ in graph.edges:
            if src == dst:
                continue
            self._adjacency[src].append(dst)
            self._in_degree[dst] += 1

    def _step_id(self, index: int) -> str:
        return self.graph.nodes[index].step_id

    def find_cycle(self) -> Optional[List[str]]:
        """Return the step ids forming a cycle, or ``None`` for a DAG."""
        WHITE, GRAY, BLACK = 0, 1, 2
        color = {n: WHITE for n in self._adjacency}
        parent: Dict[int, Optional[int]] = {n: None for n in self._adjacency}

        def dfs(node: int) -> Optional[List[int]]:
            color[node] = GRAY
            for nbr in self._adjacency[node]:
                if color[nbr] == GRAY:
                    cycle = [nbr]
                    cur: Optional[int] = node
                    while cur is not None and cur != nbr:
                        cycle.append(cur)
                        cur = parent[cur]
                    cycle.reverse()
                    return cycle
                if color[nbr] == WHITE:
                    parent[nbr] = node
                    result = dfs(nbr)
                    if result is not None:
                        return result
            color[node] = BLACK
            return None

        for node in self._adjacency:
            if color[node] == WHITE:
                result = dfs(node)
                if result is not None:
                    return [self._step_id(i) for i in result]
        return None

    def find_unreachable_nodes(self) -> List[str]:
        """Nodes after the first one that nothing points to."""
        return [self._step_id(i) for i in list(self._adjacency)[1:] if self._in_degree[i] == 0]

    def find_dead_end_nodes(self) -> List[str]:
        return [self._step_id(i) for i, succ in self._adjacency.items() if not succ]

    def topological_order(self) -> List[str]:
        """Kahn's algorithm; ties are broken by step order."""
        in_degree = dict(self._in_degree)
        ready = [i for i in self._adjacency if in_degree[i] == 0]
        order: List[int] = []
        while ready:
            ready.sort()
            node = ready.pop(0)
            order.append(node)
            for nbr in self._adjacency[node]:
                in_degree[nbr] -= 1
                if in_degree[nbr] == 0:
                    ready.append(nbr)
        if len(order) != len(self._adjacency):
            stuck = next(i for i in self._adjacency if in_degree[i] > 0)
            raise TopologicalSortError(f"cycle detected at step '{self._step_id(stuck)}'")
        return [self._step_id(i) for i in order]

    def validate(self) -> GraphValidationResult:
        result = GraphValidationResult()

        if self.find_cycle() is not None:
            result.add_error("Graph contains cycles (not a DAG)")

        unreachable = self.find_unreachable_nodes()
        if unreachable:
            result.add_warning(f"Found {len(unreachable)} unreachable nodes: {unreachable}")

        dead_ends = self.find_dead_end_nodes()
        if len(dead_ends) > 1:
            result.add_warning(f"Found {len(dead_ends)} nodes with no outgoing edges: {dead_ends}")

        try:
            order = self.topological_order()
        except TopologicalSortError as exc:
            result.add_error(f"Failed to compute topological order: {exc}")
        else:
            result.add_warning(f"Topological order: {' → '.join(order)}")

        return result


def validate_flow_graph(graph: FlowGraph) -> GraphValidationResult:
    return FlowGraphValidator(graph).validate()
