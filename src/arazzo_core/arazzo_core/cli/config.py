# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Central arazzo-check configuration.

All values have sensible defaults and can be overridden via environment variables
using the ``ARAZZO_CHECK_`` prefix:

  ARAZZO_CHECK_LOG_LEVEL                 Log level (default: WARNING)
  ARAZZO_CHECK_OUTPUT_FORMAT             Validation report format, text or table
                                          (default: text)
  ARAZZO_CHECK_GRAPH_FORMAT              Default ``visualize`` format, dot, json
                                          or mermaid (default: mermaid)
  ARAZZO_CHECK_CONDITIONAL_SELF_LOOPS    Encode success criteria as self-loop
                                          edges in the flow graph (default: true)
  ARAZZO_CHECK_DATA_DEPENDENCY_EDGES     Add DataDependency edges to the flow
                                          graph (default: false)
  ARAZZO_CHECK_SUGGESTION_CUTOFF         "Did you mean" similarity cutoff, in
                                          (0, 1] (default: 0.6)
"""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arazzo_common.constants import DEFAULT_SUGGESTION_CUTOFF

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"})
OUTPUT_FORMATS = ("text", "table")
GRAPH_FORMATS = ("dot", "json", "mermaid")


class ArazzoCheckConfig(BaseSettings):
    """Central arazzo-check configuration.

    Instantiate with ``ArazzoCheckConfig()`` to read defaults and any
    ``ARAZZO_CHECK_*`` environment variable overrides automatically.
    """

    model_config = SettingsConfigDict(env_prefix="ARAZZO_CHECK_")

    # ── Logging configuration ──────────────────────────────────────────────
    log_level: str = "WARNING"

    # ── Output configuration ───────────────────────────────────────────────
    output_format: str = "text"
    graph_format: str = "mermaid"

    # ── Flow graph configuration ───────────────────────────────────────────
    conditional_self_loops: bool = True
    data_dependency_edges: bool = False

    # ── Validation configuration ───────────────────────────────────────────
    suggestion_cutoff: float = DEFAULT_SUGGESTION_CUTOFF

    # ── Validators ─────────────────────────────────────────────────────────

    @field_validator("log_level")
    @classmethod
    def _valid_log_level(cls, v: str) -> str:
        if v.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level={v!r} is not a valid log level. "
                f"Valid values: {', '.join(sorted(_VALID_LOG_LEVELS))}"
            )
        return v.upper()

    @field_validator("output_format")
    @classmethod
    def _valid_output_format(cls, v: str) -> str:
        if v.lower() not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format={v!r} is not supported. Valid values: {', '.join(OUTPUT_FORMATS)}"
            )
        return v.lower()

    @field_validator("graph_format")
    @classmethod
    def _valid_graph_format(cls, v: str) -> str:
        if v.lower() not in GRAPH_FORMATS:
            raise ValueError(
                f"graph_format={v!r} is not supported. Valid values: {', '.join(GRAPH_FORMATS)}"
            )
        return v.lower()

    @field_validator("suggestion_cutoff")
    @classmethod
    def _valid_suggestion_cutoff(cls, v: float) -> float:
        if not (0 < v <= 1):
            raise ValueError(f"suggestion_cutoff={v} must be in (0, 1]")
        return v


# ── Module-level singleton ─────────────────────────────────────────────────────

_config: Optional[ArazzoCheckConfig] = None


def get_config() -> ArazzoCheckConfig:
    """Return the process-wide config singleton.

    Creates a fresh ``ArazzoCheckConfig`` on first call (reading env vars).
    Subsequent calls return the cached instance.
    """
    global _config
    if _config is None:
        _config = ArazzoCheckConfig()
    return _config


def load_and_validate_config() -> ArazzoCheckConfig:
    """Build, validate, cache and return the config.

    Raises ``pydantic.ValidationError`` with a clear message if any value is
    invalid. Call this once at CLI startup to surface config errors before any
    document is read.
    """
    global _config
    cfg = ArazzoCheckConfig()
    _config = cfg
    return cfg
