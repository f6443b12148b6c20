# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Node / edge storage for a workflow's flow graph.

A passive container: no validation happens here.  Nodes are addressed by
their insertion index; ``get_node_index`` maps a step id to that index.
Parallel edges and self-loops are allowed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class EdgeType(Enum):
    Sequential = "sequential"
    Conditional = "conditional"
    DataDependency = "data_dependency"
    OnSuccess = "on_success"
    OnFailure = "on_failure"


@dataclass
class FlowNode:
    step_id: str
    operation_id: Optional[str] = None
    operation_path: Optional[str] = None
    method: Optional[str] = None
    description: Optional[str] = None
    has_outputs: bool = False
    has_success_criteria: bool = False


@dataclass
class FlowEdge:
    edge_type: EdgeType
    data_ref: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def sequential(cls) -> "FlowEdge":
        return cls(EdgeType.Sequential)

    @classmethod
    def conditional(cls, description: str) -> "FlowEdge":
        return cls(EdgeType.Conditional, description=description)

    @classmethod
    def data_dependency(cls, data_ref: str) -> "FlowEdge":
        return cls(EdgeType.DataDependency, data_ref=data_ref)

    @classmethod
    def on_success(cls, description: Optional[str] = None) -> "FlowEdge":
        return cls(EdgeType.OnSuccess, description=description)

    @classmethod
    def on_failure(cls, description: Optional[str] = None) -> "FlowEdge":
        return cls(EdgeType.OnFailure, description=description)


class FlowGraph:
    def __init__(self, workflow_id: str):
        self.workflow_id = workflow_id
        self.nodes: List[FlowNode] = []
        self.edges: List[Tuple[int, int, FlowEdge]] = []
        self.data_dependencies: Dict[str, List[str]] = {}
        self._index: Dict[str, int] = {}

    def add_node(self, node: FlowNode) -> int:
        index = len(self.nodes)
        self.nodes.append(node)
        self._index[node.step_id] = index
        return index

    def add_edge(self, source: int, target: int, edge: FlowEdge) -> None:
        self.edges.append((source, target, edge))

    def get_node_index(self, step_id: str) -> Optional[int]:
        return self._index.get(step_id)

    def get_node(self, step_id: str) -> Optional[FlowNode]:
        index = self._index.get(step_id)
        return self.nodes[index] if index is not None else None

    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def successors(self, index: int) -> List[int]:
        return [dst for src, dst, _ in self.edges if src == index]

    def predecessors(self, index: int) -> List[int]:
        return [src for src, dst, _ in self.edges if dst == index]

    def edges_of_type(self, edge_type: EdgeType) -> List[Tuple[int, int, FlowEdge]]:
        return [e for e in self.edges if e[2].edge_type is edge_type]

    def step_ids(self) -> List[str]:
        return [node.step_id for node in self.nodes]

    def __repr__(self) -> str:
        return f"FlowGraph({self.workflow_id!r}, nodes={self.node_count()}, edges={self.edge_count()})"
