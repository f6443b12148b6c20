# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Map YAML key-paths to 1-based line numbers using PyYAML's AST."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import yaml

from .findings import ConsistencyValidationResult


def _compose(content: str) -> Optional[yaml.Node]:
    try:
        return yaml.compose(content)
    except yaml.YAMLError:
        return None


def extract_line_map(content: str) -> Dict[str, int]:
    """Parse *content* as YAML and return a dict mapping key-paths to line numbers.

    Key-paths follow the pattern ``"parent.child"`` for mapping keys and
    ``"parent[0]"`` for sequence items.  Line numbers are 1-based.

    Returns an empty dict if the YAML cannot be parsed.
    """
    doc = _compose(content)
    result: Dict[str, int] = {}

    def walk(node: Any, prefix: str) -> None:
        if node is None:
            return
        if isinstance(node, yaml.MappingNode):
            for kn, vn in node.value:
                key = str(kn.value)
                p = f"{prefix}.{key}" if prefix else key
                result[p] = kn.start_mark.line + 1
                walk(vn, p)
        elif isinstance(node, yaml.SequenceNode):
            for i, item in enumerate(node.value):
                p = f"{prefix}[{i}]"
                result[p] = item.start_mark.line + 1
                walk(item, p)

    walk(doc, "")
    return result


def line_for(line_map: Dict[str, int], *keys: str) -> Optional[int]:
    """Return the first matching line number from *line_map*, or None."""
    for key in keys:
        if key in line_map:
            return line_map[key]
    return None


@dataclass
class SpecPositions:
    """Lines of the ``workflowId`` / ``stepId`` keys in an Arazzo document."""

    workflows: Dict[str, int] = field(default_factory=dict)
    steps: Dict[Tuple[str, str], int] = field(default_factory=dict)

    def lookup(self, workflow_id: Optional[str], step_id: Optional[str]) -> Optional[int]:
        if workflow_id is not None and step_id is not None:
            line = self.steps.get((workflow_id, step_id))
            if line is not None:
                return line
        if workflow_id is not None:
            return self.workflows.get(workflow_id)
        return None


def extract_spec_positions(content: str) -> SpecPositions:
    """Locate every workflow and step of an Arazzo document by id.

    Ids come from the parsed document, lines from :func:`extract_line_map`
    key-paths such as ``workflows[0].steps[1].stepId``.
    """
    positions = SpecPositions()
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError:
        return positions
    workflows = data.get("workflows") if isinstance(data, dict) else None
    if not isinstance(workflows, list):
        return positions

    line_map = extract_line_map(content)
    for i, workflow in enumerate(workflows):
        if not isinstance(workflow, dict) or "workflowId" not in workflow:
            continue
        workflow_id = str(workflow["workflowId"])
        line = line_for(line_map, f"workflows[{i}].workflowId")
        if line is not None:
            positions.workflows[workflow_id] = line

        steps = workflow.get("steps")
        if not isinstance(steps, list):
            continue
        for j, step in enumerate(steps):
            if not isinstance(step, dict) or "stepId" not in step:
                continue
            line = line_for(line_map, f"workflows[{i}].steps[{j}].stepId")
            if line is not None:
                positions.steps[(workflow_id, str(step["stepId"]))] = line

    return positions


def annotate_with_line_numbers(
    result: ConsistencyValidationResult, file_path: str, content: Optional[str] = None
) -> ConsistencyValidationResult:
    """Fill in ``file_path`` / ``line_number`` on every finding of *result*.

    Findings point at the ``stepId`` line of their step, else at the
    ``workflowId`` line of their workflow.  *content* is read from
    *file_path* when not given.
    """
    if content is None:
        try:
            with open(file_path) as fh:
                content = fh.read()
        except OSError:
            content = ""
    positions = extract_spec_positions(content)

    for finding in [*result.errors, *result.warnings]:
        finding.file_path = file_path
        if finding.line_number is None:
            finding.line_number = positions.lookup(finding.workflow_id, finding.step_id)
    return result
