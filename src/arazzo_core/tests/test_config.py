# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from arazzo_core.cli import config as config_module
from arazzo_core.cli.config import ArazzoCheckConfig, get_config, load_and_validate_config


class TestDefaults:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            cfg = ArazzoCheckConfig()
        assert cfg.log_level == "WARNING"
        assert cfg.output_format == "text"
        assert cfg.graph_format == "mermaid"
        assert cfg.conditional_self_loops is True
        assert cfg.data_dependency_edges is False
        assert cfg.suggestion_cutoff == 0.6


class TestEnvOverrides:
    """ARAZZO_CHECK_* env vars override config values."""

    @pytest.mark.parametrize(
        "env_var, field, value, expected",
        [
            ("ARAZZO_CHECK_LOG_LEVEL", "log_level", "INFO", "INFO"),
            ("ARAZZO_CHECK_LOG_LEVEL", "log_level", "debug", "DEBUG"),
            ("ARAZZO_CHECK_OUTPUT_FORMAT", "output_format", "table", "table"),
            ("ARAZZO_CHECK_OUTPUT_FORMAT", "output_format", "TEXT", "text"),
            ("ARAZZO_CHECK_GRAPH_FORMAT", "graph_format", "dot", "dot"),
            ("ARAZZO_CHECK_GRAPH_FORMAT", "graph_format", "Json", "json"),
            ("ARAZZO_CHECK_CONDITIONAL_SELF_LOOPS", "conditional_self_loops", "false", False),
            ("ARAZZO_CHECK_DATA_DEPENDENCY_EDGES", "data_dependency_edges", "true", True),
            ("ARAZZO_CHECK_SUGGESTION_CUTOFF", "suggestion_cutoff", "0.8", 0.8),
            ("ARAZZO_CHECK_SUGGESTION_CUTOFF", "suggestion_cutoff", "1", 1.0),
        ],
    )
    def test_env_var_overrides_field(self, env_var, field, value, expected):
        with patch.dict(os.environ, {env_var: value}):
            cfg = ArazzoCheckConfig()
            assert getattr(cfg, field) == expected


class TestValidation:
    """Bad settings fail before any document is read."""

    @pytest.mark.parametrize(
        "env_var, value, error_match",
        [
            ("ARAZZO_CHECK_LOG_LEVEL", "TRACE", "is not a valid log level"),
            ("ARAZZO_CHECK_LOG_LEVEL", "verbose", "is not a valid log level"),
            ("ARAZZO_CHECK_OUTPUT_FORMAT", "html", "output_format='html' is not supported"),
            ("ARAZZO_CHECK_GRAPH_FORMAT", "png", "graph_format='png' is not supported"),
            ("ARAZZO_CHECK_SUGGESTION_CUTOFF", "0", r"must be in \(0, 1\]"),
            ("ARAZZO_CHECK_SUGGESTION_CUTOFF", "1.5", r"must be in \(0, 1\]"),
            ("ARAZZO_CHECK_SUGGESTION_CUTOFF", "close", "suggestion_cutoff"),
            ("ARAZZO_CHECK_DATA_DEPENDENCY_EDGES", "sometimes", "data_dependency_edges"),
        ],
    )
    def test_bad_value_rejected(self, env_var, value, error_match):
        with patch.dict(os.environ, {env_var: value}):
            with pytest.raises(ValidationError, match=error_match):
                ArazzoCheckConfig()


class TestSingleton:
    @pytest.fixture(autouse=True)
    def reset(self):
        config_module._config = None
        yield
        config_module._config = None

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_load_and_validate_replaces_cache(self):
        first = get_config()
        with patch.dict(os.environ, {"ARAZZO_CHECK_GRAPH_FORMAT": "dot"}):
            cfg = load_and_validate_config()
        assert cfg is not first
        assert get_config() is cfg
        assert cfg.graph_format == "dot"

    def test_load_and_validate_raises(self):
        with patch.dict(os.environ, {"ARAZZO_CHECK_LOG_LEVEL": "loud"}):
            with pytest.raises(ValidationError):
                load_and_validate_config()
