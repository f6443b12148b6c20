# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Flow graph of an Arazzo workflow.

Public API
----------
FlowGraph               Node / edge container built per workflow.
FlowNode, FlowEdge      Graph elements; EdgeType tags each edge.
build_flow_graph        Build a FlowGraph from a Workflow (FlowGraphBuilder).
validate_flow_graph     Structural checks: cycles, reachability, dead ends, order.
export_dot              Graphviz rendering.
export_json             JSON document rendering.
export_mermaid          Mermaid flowchart rendering.
"""

from .builder import FlowGraphBuilder, build_flow_graph
from .exporter import FlowGraphExporter, export_dot, export_json, export_mermaid
from .model import EdgeType, FlowEdge, FlowGraph, FlowNode
from .validator import FlowGraphValidator, GraphValidationResult, validate_flow_graph

__all__ = [
    "EdgeType",
    "FlowEdge",
    "FlowGraph",
    "FlowGraphBuilder",
    "FlowGraphExporter",
    "FlowGraphValidator",
    "FlowNode",
    "GraphValidationResult",
    "build_flow_graph",
    "export_dot",
    "export_json",
    "export_mermaid",
    "validate_flow_graph",
]
