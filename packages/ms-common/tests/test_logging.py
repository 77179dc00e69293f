"""
Tests for structlog configuration.
"""

from __future__ import annotations

import json
import logging

import structlog

from ms_common.logging import configure_logging, resolve_level


class TestResolveLevel:
    def test_known_level(self) -> None:
        assert resolve_level("debug") == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        assert resolve_level("chatty") == logging.INFO

    def test_none_is_info(self) -> None:
        assert resolve_level(None) == logging.INFO

    def test_standard_aliases_and_padding(self) -> None:
        assert resolve_level(" warn ") == logging.WARNING
        assert resolve_level("Critical") == logging.CRITICAL
        assert resolve_level("NOTSET") == logging.NOTSET


class TestConfigureLogging:
    def teardown_method(self) -> None:
        structlog.reset_defaults()

    def test_json_output_includes_service(self, capsys) -> None:
        configure_logging("auditor", "INFO", json_output=True)
        structlog.get_logger().info("hello", answer=42)
        line = capsys.readouterr().out.strip().splitlines()[-1]
        data = json.loads(line)
        assert data["event"] == "hello"
        assert data["service"] == "auditor"
        assert data["level"] == "info"
        assert data["answer"] == 42
        assert "timestamp" in data

    def test_level_filtering(self, capsys) -> None:
        configure_logging("auditor", "WARNING", json_output=True)
        structlog.get_logger().info("quiet")
        assert capsys.readouterr().out == ""
