# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import textwrap

import pytest
import yaml

from arazzo_common.spec import parse_arazzo
from arazzo_common.validation import (
    ConsistencyValidationResult,
    ErrorType,
    ValidationError,
    ValidationWarning,
    annotate_with_line_numbers,
    extract_line_map,
    extract_spec_positions,
    line_for,
    suggest,
    validate_consistency,
)


ARAZZO_YAML = textwrap.dedent(
    """\
    arazzo: 1.0.0
    info:
      title: Users
      version: 1.0.0
    sourceDescriptions:
      - name: users
        url: users.yaml
        type: openapi
    workflows:
      - workflowId: signup
        steps:
          - stepId: create
            operationId: createUsr
          - description: fetch the new user
            stepId: fetch
            operationId: getUser
      - workflowId: cleanup
        steps:
          - stepId: remove
            operationId: deleteUser
    """
)


class TestLineMap:
    def test_key_paths(self):
        line_map = extract_line_map(ARAZZO_YAML)
        assert line_map["arazzo"] == 1
        assert line_map["info.title"] == 3
        assert line_map["workflows[0]"] == 10
        assert line_map["workflows[0].steps[1].stepId"] == 15
        assert line_map["workflows[1].workflowId"] == 17

    def test_invalid_yaml_gives_empty_map(self):
        assert extract_line_map("a: [b") == {}

    def test_line_for_first_match(self):
        line_map = {"a": 1, "b": 2}
        assert line_for(line_map, "missing", "b", "a") == 2
        assert line_for(line_map, "missing") is None


class TestSpecPositions:
    def test_positions_by_id(self):
        positions = extract_spec_positions(ARAZZO_YAML)
        assert positions.workflows == {"signup": 10, "cleanup": 17}
        assert positions.steps[("signup", "create")] == 12
        # stepId line, not the start of the item
        assert positions.steps[("signup", "fetch")] == 15
        assert positions.steps[("cleanup", "remove")] == 19

    @pytest.mark.parametrize(
        "workflow_id, step_id, expected",
        [("signup", "fetch", 15), ("signup", "ghost", 10), ("signup", None, 10), ("ghost", None, None), (None, None, None)],
    )
    def test_lookup(self, workflow_id, step_id, expected):
        assert extract_spec_positions(ARAZZO_YAML).lookup(workflow_id, step_id) == expected

    def test_positions_match_line_map(self):
        content = "workflows:\n  - workflowId: w\n    steps:\n      - not-a-step\n      - stepId: b\n        operationId: x\n"
        line_map = extract_line_map(content)
        positions = extract_spec_positions(content)
        assert positions.workflows == {"w": line_map["workflows[0].workflowId"]} == {"w": 2}
        assert positions.steps == {("w", "b"): line_map["workflows[0].steps[1].stepId"]} == {("w", "b"): 5}

    @pytest.mark.parametrize("content", ["", "- a\n- b\n", "workflows: 3\n", "a: [b"])
    def test_unusual_documents(self, content):
        positions = extract_spec_positions(content)
        assert positions.workflows == {}
        assert positions.steps == {}


class TestAnnotate:
    def test_findings_point_at_step_lines(self, resolver):
        spec = parse_arazzo(yaml.safe_load(ARAZZO_YAML))
        result = validate_consistency(spec, resolver)
        assert [e.step_id for e in result.errors] == ["create"]

        annotate_with_line_numbers(result, "flow.yaml", ARAZZO_YAML)

        error = result.errors[0]
        assert (error.file_path, error.line_number) == ("flow.yaml", 12)
        assert error.format().startswith("flow.yaml:12 [workflow: signup, step: create]")
        assert error.suggestion.startswith("'createUser'")

    def test_reads_file_when_content_missing(self, tmp_path):
        path = tmp_path / "flow.yaml"
        path.write_text(ARAZZO_YAML)
        result = ConsistencyValidationResult()
        result.extend(
            [ValidationError(ErrorType.StepOrderViolation, "bad", workflow_id="cleanup", step_id="remove")],
            [ValidationWarning("hm", workflow_id="signup")],
        )

        annotate_with_line_numbers(result, str(path))

        assert result.errors[0].line_number == 19
        assert result.warnings[0].line_number == 10
        assert result.warnings[0].file_path == str(path)

    def test_existing_line_numbers_are_kept(self):
        result = ConsistencyValidationResult()
        result.extend([], [ValidationWarning("hm", workflow_id="signup", line_number=3)])
        annotate_with_line_numbers(result, "flow.yaml", ARAZZO_YAML)
        assert result.warnings[0].line_number == 3

    def test_unknown_workflow_has_no_line(self):
        result = ConsistencyValidationResult()
        result.extend([ValidationError(ErrorType.WorkflowRefNotFound, "x", workflow_id="other")], [])
        annotate_with_line_numbers(result, "flow.yaml", ARAZZO_YAML)
        assert result.errors[0].line_number is None
        assert result.errors[0].format() == "flow.yaml [workflow: other] x"


class TestSuggest:
    @pytest.mark.parametrize(
        "ref, candidates, expected",
        [
            ("getUsr", ["getUser", "listUsers", "login"], "'getUser'"),
            ("createUsers", ["createUser", "login"], "'createUser'"),
            ("zzz", ["getUser", "login"], None),
            ("getUser", [], None),
        ],
    )
    def test_suggestions(self, ref, candidates, expected):
        assert suggest(ref, candidates) == expected

    def test_ref_itself_is_never_suggested(self):
        assert suggest("login", ["login", "logins"]) == "'logins'"

    def test_duplicates_collapse(self):
        assert suggest("getUsr", ["getUser", "getUser"]) == "'getUser'"

    def test_at_most_n(self):
        found = suggest("user", ["user1", "user2", "user3", "user4"], n=2)
        assert found.count("'") == 4

    def test_cutoff(self):
        assert suggest("getUsr", ["getUser"], cutoff=0.99) is None
