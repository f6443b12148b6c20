# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Render a flow graph as Graphviz DOT, a JSON document, or a Mermaid flowchart.

Exporting never validates: cyclic or otherwise broken graphs render as-is.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple

from .model import EdgeType, FlowEdge, FlowGraph, FlowNode

_DOT_EDGE_STYLE: Dict[EdgeType, Tuple[str, str]] = {
    EdgeType.Sequential: ("solid", "black"),
    EdgeType.Conditional: ("dashed", "orange"),
    EdgeType.DataDependency: ("dotted", "blue"),
    EdgeType.OnSuccess: ("solid", "green"),
    EdgeType.OnFailure: ("solid", "red"),
}

_FILL_COLOR = {"orange": "lightyellow", "blue": "lightblue"}

_MERMAID_ARROW: Dict[EdgeType, str] = {
    EdgeType.Sequential: "-->",
    EdgeType.Conditional: "-.->",
    EdgeType.DataDependency: "==>",
    EdgeType.OnSuccess: "==>",
    EdgeType.OnFailure: "-.->",
}

_MERMAID_ID_RE = re.compile(r"[^A-Za-z0-9_]")

# Words the flowchart grammar reads as keywords when used as a node id
_MERMAID_RESERVED = frozenset(
    {
        "end", "graph", "subgraph", "flowchart", "style", "class",
        "classdef", "click", "linkstyle", "default", "direction",
    }
)


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _mermaid_ids(step_ids: List[str]) -> Dict[str, str]:
    """Map step ids to distinct Mermaid node ids, in step order."""
    ids: Dict[str, str] = {}
    taken = set()
    for step_id in step_ids:
        base = _MERMAID_ID_RE.sub("_", step_id) or "_"
        if base.lower() in _MERMAID_RESERVED:
            base = f"step_{base}"
        candidate, n = base, 2
        while candidate in taken:
            candidate = f"{base}_{n}"
            n += 1
        taken.add(candidate)
        ids[step_id] = candidate
    return ids


def _mermaid_text(text: str) -> str:
    return text.replace('"', "#quot;").replace("|", "#124;")


def _edge_label(edge: FlowEdge) -> Optional[str]:
    if edge.edge_type is EdgeType.Sequential:
        return None
    if edge.edge_type is EdgeType.DataDependency:
        return edge.data_ref
    return edge.description


def _node_color(node: FlowNode) -> str:
    if node.has_success_criteria:
        return "orange"
    if node.has_outputs:
        return "blue"
    return "black"


class FlowGraphExporter:
    def __init__(self, graph: FlowGraph):
        self.graph = graph

    def _label_parts(self, node: FlowNode) -> List[str]:
        parts = [node.step_id]
        if node.operation_id:
            parts.append(node.operation_id)
        if node.method:
            parts.append(f"[{node.method}]")
        return parts

    def export_dot(self) -> str:
        lines = [
            f'digraph "{_dot_escape(self.graph.workflow_id)}" {{',
            "  rankdir=LR;",
            "  node [shape=box, style=rounded];",
            "",
        ]
        for node in self.graph.nodes:
            label = "\\n".join(_dot_escape(part) for part in self._label_parts(node))
            color = _node_color(node)
            lines.append(
                f'  "{_dot_escape(node.step_id)}" [label="{label}", color="{color}", '
                f'fillcolor="{_FILL_COLOR.get(color, "lightgray")}", style="rounded,filled"];'
            )
        lines.append("")
        for src, dst, edge in self.graph.edges:
            style, color = _DOT_EDGE_STYLE[edge.edge_type]
            label = _dot_escape(_edge_label(edge) or "")
            lines.append(
                f'  "{_dot_escape(self.graph.nodes[src].step_id)}" -> '
                f'"{_dot_escape(self.graph.nodes[dst].step_id)}" '
                f'[style="{style}", color="{color}", label="{label}"];'
            )
        lines.append("}")
        return "\n".join(lines) + "\n"

    def export_json(self) -> Dict[str, Any]:
        return {
            "workflowId": self.graph.workflow_id,
            "nodes": [
                {
                    "id": node.step_id,
                    "operationId": node.operation_id,
                    "operationPath": node.operation_path,
                    "method": node.method,
                    "description": node.description,
                    "hasOutputs": node.has_outputs,
                    "hasSuccessCriteria": node.has_success_criteria,
                }
                for node in self.graph.nodes
            ],
            "edges": [
                {
                    "source": self.graph.nodes[src].step_id,
                    "target": self.graph.nodes[dst].step_id,
                    "edge_type": edge.edge_type.name,
                    "dataRef": edge.data_ref,
                    "description": edge.description,
                }
                for src, dst, edge in self.graph.edges
            ],
            "stats": {
                "nodeCount": self.graph.node_count(),
                "edgeCount": self.graph.edge_count(),
            },
        }

    def export_json_string(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.export_json(), indent=indent)

    def export_mermaid(self) -> str:
        lines = ["flowchart LR"]
        node_ids = _mermaid_ids([node.step_id for node in self.graph.nodes])
        for node in self.graph.nodes:
            label = _mermaid_text("<br/>".join(self._label_parts(node)))
            if node.has_success_criteria:
                shape = f'("{label}")'
            elif node.has_outputs:
                shape = f'(["{label}"])'
            else:
                shape = f'["{label}"]'
            lines.append(f"  {node_ids[node.step_id]}{shape}")
        lines.append("")
        for src, dst, edge in self.graph.edges:
            source = node_ids[self.graph.nodes[src].step_id]
            target = node_ids[self.graph.nodes[dst].step_id]
            arrow = _MERMAID_ARROW[edge.edge_type]
            label = _edge_label(edge)
            if label:
                lines.append(f"  {source} {arrow}|{_mermaid_text(label)}| {target}")
            else:
                lines.append(f"  {source} {arrow} {target}")
        return "\n".join(lines) + "\n"


def export_dot(graph: FlowGraph) -> str:
    return FlowGraphExporter(graph).export_dot()


def export_json(graph: FlowGraph) -> Dict[str, Any]:
    return FlowGraphExporter(graph).export_json()


def export_mermaid(graph: FlowGraph) -> str:
    return FlowGraphExporter(graph).export_mermaid()
