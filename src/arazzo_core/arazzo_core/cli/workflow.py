# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""arazzo-check commands: validate, visualize and list."""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pydantic import ValidationError as ConfigValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from arazzo_common.graph import (
    FlowGraphExporter,
    build_flow_graph,
    validate_flow_graph,
)
from arazzo_common.spec import (
    ArazzoSpec,
    OpenApiResolver,
    SourceDescriptionResolver,
    SpecLoadError,
    load_arazzo,
)
from arazzo_common.validation import (
    ArazzoOpenApiValidator,
    annotate_with_line_numbers,
    extract_spec_positions,
)

from ..logconfig import configure_logging
from .config import GRAPH_FORMATS, OUTPUT_FORMATS, ArazzoCheckConfig, load_and_validate_config
from .errors import console as err_console
from .errors import show_error, show_success

LOGGER = logging.getLogger(__name__)

console = Console()

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_BAD_INPUT = 2

# Graph validator note that is not a problem
_TOPOLOGICAL_ORDER_PREFIX = "Topological order:"


@dataclass
class ReportRow:
    severity: str  # "error" | "warning"
    file: str
    line: Optional[int]
    context: str
    message: str
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        loc = self.file
        if self.line is not None:
            loc += f":{self.line}"
        msg = f"{loc}: {self.severity}: {self.message}"
        if self.context:
            msg += f" (in {self.context})"
        if self.suggestion:
            msg += f". Did you mean {self.suggestion}?"
        return msg


def _source_arg(value: str) -> Tuple[str, str]:
    name, sep, path = value.partition("=")
    if not sep or not name or not path:
        raise argparse.ArgumentTypeError(f"expected NAME=PATH, got {value!r}")
    return name, path


def _context(workflow_id: Optional[str], step_id: Optional[str]) -> str:
    if workflow_id and step_id:
        return f"workflow '{workflow_id}', step '{step_id}'"
    if workflow_id:
        return f"workflow '{workflow_id}'"
    return f"step '{step_id}'" if step_id else ""


def build_workflow_parser() -> argparse.ArgumentParser:
    """Build the argument parser for arazzo-check."""
    parser = argparse.ArgumentParser(
        description="Validate and visualize Arazzo workflows against their OpenAPI sources",
        prog="arazzo-check",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Log level (default: ARAZZO_CHECK_LOG_LEVEL or WARNING)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Command to run",
        required=True,
    )

    # validate subcommand
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate an Arazzo document",
        description=(
            "Check every workflow of an Arazzo document against the OpenAPI documents "
            "named in its sourceDescriptions, and check each workflow's flow graph for "
            "cycles, unreachable steps and dead ends."
        ),
    )
    validate_parser.add_argument("arazzo", help="Path to the Arazzo document")
    validate_parser.add_argument(
        "--openapi",
        type=_source_arg,
        action="append",
        default=[],
        metavar="NAME=PATH",
        help="Load an extra OpenAPI document as source NAME (repeatable)",
    )
    validate_parser.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: ARAZZO_CHECK_OUTPUT_FORMAT or text)",
    )
    validate_parser.add_argument(
        "--warnings-as-errors",
        "-W",
        action="store_true",
        help="Treat warnings as errors (affects exit code)",
    )
    validate_parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only output errors and summary",
    )

    # visualize subcommand
    visualize_parser = subparsers.add_parser(
        "visualize",
        help="Export a workflow's flow graph",
        description="Render the flow graph of one workflow as DOT, JSON or Mermaid.",
    )
    visualize_parser.add_argument("arazzo", help="Path to the Arazzo document")
    visualize_parser.add_argument(
        "--workflow",
        default=None,
        help="workflowId to render (default: the first workflow)",
    )
    visualize_parser.add_argument(
        "--format",
        choices=list(GRAPH_FORMATS),
        default=None,
        help="Graph format (default: ARAZZO_CHECK_GRAPH_FORMAT or mermaid)",
    )
    visualize_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the graph to this file instead of stdout",
    )

    # list subcommand
    list_parser = subparsers.add_parser(
        "list",
        help="List workflows and steps",
        description="Print the workflows and steps of an Arazzo document.",
    )
    list_parser.add_argument("arazzo", help="Path to the Arazzo document")

    return parser


def _load(path: str) -> Optional[ArazzoSpec]:
    try:
        return load_arazzo(path)
    except (FileNotFoundError, SpecLoadError) as exc:
        show_error("Could not load Arazzo document", str(exc))
        return None


def _load_sources(
    path: str, spec: ArazzoSpec, extra: List[Tuple[str, str]], rows: List[ReportRow]
) -> Optional[OpenApiResolver]:
    result = SourceDescriptionResolver(path).load_sources(spec.source_descriptions)
    for err in result.errors:
        rows.append(ReportRow("warning", path, None, f"source '{err.source_name}'", f"{err.url}: {err.message}"))

    for name, openapi_path in extra:
        try:
            result.resolver.load_spec(name, openapi_path)
        except (FileNotFoundError, SpecLoadError) as exc:
            show_error(f"Could not load OpenAPI document '{name}'", str(exc))
            return None
    return result.resolver


def _graph_rows(path: str, spec: ArazzoSpec, resolver: OpenApiResolver, cfg: ArazzoCheckConfig) -> Tuple[List[ReportRow], List[str]]:
    with open(path) as fh:
        positions = extract_spec_positions(fh.read())

    rows: List[ReportRow] = []
    notes: List[str] = []
    for workflow in spec.workflows:
        graph = build_flow_graph(
            workflow,
            resolver if len(resolver) else None,
            conditional_self_loops=cfg.conditional_self_loops,
            data_dependency_edges=cfg.data_dependency_edges,
        )
        result = validate_flow_graph(graph)
        line = positions.workflows.get(workflow.workflow_id)
        context = _context(workflow.workflow_id, None)
        for message in result.errors:
            rows.append(ReportRow("error", path, line, context, message))
        for message in result.warnings:
            if message.startswith(_TOPOLOGICAL_ORDER_PREFIX):
                notes.append(f"{workflow.workflow_id}: {message}")
            else:
                rows.append(ReportRow("warning", path, line, context, message))
    return rows, notes


def print_result_text(rows: List[ReportRow], quiet: bool = False):
    """Print validation rows in text format."""
    for row in rows:
        if quiet and row.severity == "warning":
            continue
        style = "red" if row.severity == "error" else "yellow"
        console.print(f"[{style}]{escape(str(row))}[/{style}]", soft_wrap=True)


def print_result_table(rows: List[ReportRow], quiet: bool = False):
    """Print validation rows in table format."""
    if not rows:
        return

    table = Table(title="Validation Results")
    table.add_column("File", style="cyan")
    table.add_column("Line", style="magenta")
    table.add_column("Severity", style="bold")
    table.add_column("Message")
    table.add_column("Suggestion", style="green")

    for row in rows:
        if quiet and row.severity == "warning":
            continue
        severity_style = "red" if row.severity == "error" else "yellow"
        table.add_row(
            escape(row.file),
            str(row.line) if row.line else "-",
            f"[{severity_style}]{row.severity}[/{severity_style}]",
            escape(row.message + (f" (in {row.context})" if row.context else "")),
            escape(row.suggestion) if row.suggestion else "-",
        )

    console.print(table)


def cmd_validate(args: argparse.Namespace, cfg: ArazzoCheckConfig) -> int:
    """Execute the validate command."""
    spec = _load(args.arazzo)
    if spec is None:
        return EXIT_BAD_INPUT

    rows: List[ReportRow] = []
    resolver = _load_sources(args.arazzo, spec, args.openapi, rows)
    if resolver is None:
        return EXIT_BAD_INPUT

    if not args.quiet:
        console.print(f"Validating: {escape(args.arazzo)}")
        LOGGER.info("Resolving operations against %d OpenAPI source(s)", len(resolver))

    result = ArazzoOpenApiValidator(spec, resolver, cfg.suggestion_cutoff).validate_all()
    annotate_with_line_numbers(result, args.arazzo)
    for error in result.errors:
        rows.append(
            ReportRow(
                "error",
                error.file_path or args.arazzo,
                error.line_number,
                _context(error.workflow_id, error.step_id),
                error.message,
                error.suggestion,
            )
        )
    for warning in result.warnings:
        rows.append(
            ReportRow(
                "warning",
                warning.file_path or args.arazzo,
                warning.line_number,
                _context(warning.workflow_id, warning.step_id),
                warning.message,
            )
        )

    graph_rows, notes = _graph_rows(args.arazzo, spec, resolver, cfg)
    rows.extend(graph_rows)

    fmt = args.format or cfg.output_format
    if fmt == "table":
        print_result_table(rows, args.quiet)
    else:
        print_result_text(rows, args.quiet)

    if not args.quiet:
        for note in notes:
            console.print(f"[dim]{escape(note)}[/dim]", soft_wrap=True)

    error_count = sum(1 for r in rows if r.severity == "error")
    warning_count = len(rows) - error_count

    if error_count == 0 and warning_count == 0:
        if not args.quiet:
            console.print("[green]All workflows valid.[/green]")
        return EXIT_OK

    summary_parts = []
    if error_count > 0:
        summary_parts.append(f"[red]{error_count} error{'s' if error_count != 1 else ''}[/red]")
    if warning_count > 0:
        summary_parts.append(
            f"[yellow]{warning_count} warning{'s' if warning_count != 1 else ''}[/yellow]"
        )

    console.print(f"\nValidation complete: {', '.join(summary_parts)}")

    if error_count:
        return EXIT_FINDINGS
    if args.warnings_as_errors and warning_count:
        return EXIT_FINDINGS
    return EXIT_OK


def cmd_visualize(args: argparse.Namespace, cfg: ArazzoCheckConfig) -> int:
    """Execute the visualize command."""
    spec = _load(args.arazzo)
    if spec is None:
        return EXIT_BAD_INPUT
    if not spec.workflows:
        show_error("Nothing to visualize", "No workflows found in Arazzo file")
        return EXIT_BAD_INPUT

    if args.workflow is None:
        workflow = spec.workflows[0]
    else:
        workflow = spec.get_workflow(args.workflow)
        if workflow is None:
            known = ", ".join(w.workflow_id for w in spec.workflows)
            show_error(f"Workflow '{args.workflow}' not found", f"Known workflows: {known}")
            return EXIT_BAD_INPUT

    sources = SourceDescriptionResolver(args.arazzo).load_sources(spec.source_descriptions)
    for err in sources.errors:
        err_console.print(f"[yellow]⚠ {escape(str(err))}[/yellow]", soft_wrap=True)

    graph = build_flow_graph(
        workflow,
        sources.resolver if len(sources.resolver) else None,
        conditional_self_loops=cfg.conditional_self_loops,
        data_dependency_edges=cfg.data_dependency_edges,
    )
    result = validate_flow_graph(graph)
    for message in result.errors:
        err_console.print(f"[red]✗ {escape(message)}[/red]", soft_wrap=True)
    for message in result.warnings:
        err_console.print(f"[dim]{escape(message)}[/dim]", soft_wrap=True)

    exporter = FlowGraphExporter(graph)
    fmt = args.format or cfg.graph_format
    if fmt == "dot":
        output = exporter.export_dot()
    elif fmt == "json":
        output = exporter.export_json_string() + "\n"
    else:
        output = exporter.export_mermaid()

    if args.output:
        with open(args.output, "w") as fh:
            fh.write(output)
        show_success(f"Output written to: {args.output}")
    else:
        sys.stdout.write(output)
    return EXIT_OK


def cmd_list(args: argparse.Namespace, cfg: ArazzoCheckConfig) -> int:
    """Execute the list command."""
    spec = _load(args.arazzo)
    if spec is None:
        return EXIT_BAD_INPUT

    console.print(f"[bold]{escape(spec.info.title)}[/bold] {escape(spec.info.version)} (Arazzo {escape(spec.arazzo)})")
    if not spec.workflows:
        console.print("[yellow]No workflows found[/yellow]")
        return EXIT_OK

    table = Table(title=f"Workflows ({len(spec.workflows)})")
    table.add_column("Workflow", style="cyan")
    table.add_column("#", style="magenta")
    table.add_column("Step", style="bold")
    table.add_column("Operation")
    table.add_column("Description")

    for workflow in spec.workflows:
        for i, step in enumerate(workflow.steps, start=1):
            if step.operation_id is not None:
                operation = step.operation_id
            elif step.operation_path is not None:
                operation = step.operation_path
            else:
                operation = f"workflow: {step.workflow_id}"
            table.add_row(
                escape(workflow.workflow_id) if i == 1 else "",
                str(i),
                escape(step.step_id),
                escape(operation),
                escape(step.description or ""),
            )

    console.print(table)
    return EXIT_OK


def dispatch(args: argparse.Namespace, cfg: ArazzoCheckConfig) -> int:
    """Dispatch to the appropriate command handler."""
    if args.command == "validate":
        return cmd_validate(args, cfg)
    elif args.command == "visualize":
        return cmd_visualize(args, cfg)
    elif args.command == "list":
        return cmd_list(args, cfg)
    else:
        console.print(f"[red]Unknown command: {args.command}[/red]")
        return EXIT_BAD_INPUT


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for arazzo-check."""
    parser = build_workflow_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_and_validate_config()
    except ConfigValidationError as exc:
        show_error("Invalid configuration", str(exc))
        return EXIT_BAD_INPUT

    configure_logging(args.log_level or cfg.log_level)
    return dispatch(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
