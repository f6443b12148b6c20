# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Error panels for documents that cannot be loaded."""

import re
from typing import Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)

ERROR_PATTERNS = {
    "missing": {
        "pattern": r"(file not found|no such file)",
        "message": "File not found",
        "action": "Check the path, relative source URLs resolve against the Arazzo file's directory",
    },
    "yaml": {
        "pattern": r"failed to parse yaml",
        "message": "The file is not valid YAML",
        "action": "Fix the syntax error at the line reported below",
    },
    "arazzo_version": {
        "pattern": r"unsupported arazzo version",
        "message": "Unsupported Arazzo version",
        "action": "Only Arazzo 1.x documents are supported, check the `arazzo` field",
    },
    "openapi_version": {
        "pattern": r"unsupported openapi version",
        "message": "Unsupported OpenAPI version",
        "action": "Only OpenAPI 3.0.x and 3.1.x documents are supported",
    },
    "duplicate": {
        "pattern": r"duplicate (workflowid|stepid)",
        "message": "Duplicate identifier",
        "action": "Workflow ids must be unique in the document, step ids within their workflow",
    },
    "operation_ref": {
        "pattern": r"(must specify one of|more than one operation reference)",
        "message": "Step operation reference",
        "action": "Give each step exactly one of operationId, operationPath or workflowId",
    },
    "remote": {
        "pattern": r"remote urls are not supported",
        "message": "Remote source description",
        "action": "Download the OpenAPI document and pass it with `--openapi NAME=PATH`",
    },
    "config": {
        "pattern": r"validation error.* for arazzocheckconfig",
        "message": "Invalid ARAZZO_CHECK_* environment setting",
        "action": "Fix or unset the environment variable named below",
    },
}


def detect_error_pattern(output: str) -> Optional[Tuple[str, str]]:
    output_lower = output.lower()
    for pattern_info in ERROR_PATTERNS.values():
        if re.search(pattern_info["pattern"], output_lower, re.IGNORECASE):
            return (pattern_info["message"], pattern_info["action"])
    return None


def show_error(title: str, output: str):
    """Display a formatted error with smart extraction."""
    console.print()
    detected = detect_error_pattern(output)
    if detected:
        message, action = detected
        error_text = Text()
        error_text.append(f"✗ {title}\n\n", style="bold red")
        error_text.append(f"{message}\n\n", style="red")
        error_text.append("→ Fix: ", style="bold yellow")
        error_text.append(f"{action}\n", style="yellow")
        console.print(Panel(error_text, border_style="red", expand=False))
    else:
        console.print(Panel(Text(f"✗ {title}", style="bold red"), border_style="red", expand=False))

    lines = output.strip().split("\n")
    context = lines[-10:] if len(lines) > 10 else lines
    if context:
        console.print("\n[dim]Details:[/dim]")
        for line in context:
            console.print(f"  [dim]│[/dim] {escape(line)}")

    console.print()


def show_success(message: str):
    console.print(f"[green]✓[/green] {escape(message)}", style="green")
