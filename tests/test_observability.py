"""
Tests for request context, log formatting and health checks.
"""

import json
import logging
import re
from collections import namedtuple
from logging.handlers import RotatingFileHandler

import pytest

from lib import config
from lib.observability import (
    HealthChecker,
    HealthCheckResult,
    HealthStatus,
    HumanFormatter,
    JSONFormatter,
    RequestContext,
    configure_logging,
    generate_request_id,
    get_request_id,
)

DiskUsage = namedtuple("DiskUsage", "total used free")


def make_record(msg="hello %s", args=("world",), **extra):
    record = logging.LogRecord("lib.test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def roomy_disk(monkeypatch):
    monkeypatch.setattr(
        "lib.observability.health.shutil.disk_usage", lambda path: DiskUsage(100, 10, 90)
    )


# =============================================================================
# Request context
# =============================================================================


class TestRequestContext:
    def test_generated_id_format(self):
        assert re.fullmatch(r"req-[0-9a-f]{16}", generate_request_id())

    def test_binds_and_resets(self):
        assert get_request_id() is None
        with RequestContext("req-outer") as ctx:
            assert ctx.request_id == "req-outer"
            assert get_request_id() == "req-outer"
            with RequestContext("req-inner"):
                assert get_request_id() == "req-inner"
            assert get_request_id() == "req-outer"
        assert get_request_id() is None

    def test_generates_id_when_missing(self):
        with RequestContext() as ctx:
            assert get_request_id() == ctx.request_id
            assert ctx.request_id.startswith("req-")


# =============================================================================
# Formatters
# =============================================================================


class TestFormatters:
    def test_json_line(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["logger"] == "lib.test"
        assert data["timestamp"].endswith("Z")
        assert "request_id" not in data

    def test_json_carries_request_id_and_extra(self):
        with RequestContext("req-abc"):
            line = JSONFormatter().format(make_record(status_code=404, duration_ms=1.5))
        data = json.loads(line)
        assert data["request_id"] == "req-abc"
        assert data["status_code"] == 404
        assert data["duration_ms"] == 1.5
        assert "args" not in data
        assert "levelno" not in data

    def test_json_keeps_accents(self):
        line = JSONFormatter().format(make_record("Soldé", ()))
        assert "Soldé" in line

    def test_human_line(self):
        with RequestContext("req-0123456789abcdef"):
            line = HumanFormatter().format(make_record())
        assert "[INFO] lib.test: [req-01234567] hello world" in line


class TestConfigureLogging:
    def test_json_and_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        configure_logging(level="DEBUG", json_format=True, log_file=str(log_file))

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert isinstance(root.handlers[1], RotatingFileHandler)
        assert log_file.parent.is_dir()
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_human(self, restore_root_logger):
        configure_logging(json_format=False)
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, HumanFormatter)


# =============================================================================
# Health
# =============================================================================


class TestHealthChecker:
    def test_healthy_with_key(self, fixture_db_path, monkeypatch, roomy_disk):
        monkeypatch.setattr(config, "ANTHROPIC_API_KEY", "sk-test")
        report = HealthChecker(db_path=fixture_db_path).run_all()
        assert report.status == HealthStatus.HEALTHY
        assert [c.name for c in report.checks] == [
            "db",
            "schema_version",
            "critical_tables",
            "anthropic",
            "disk_space",
        ]

    def test_missing_key_degrades(self, fixture_db_path, monkeypatch, roomy_disk):
        monkeypatch.setattr(config, "ANTHROPIC_API_KEY", None)
        report = HealthChecker(db_path=fixture_db_path).run_all()
        assert report.status == HealthStatus.DEGRADED

    def test_missing_database(self, tmp_path, roomy_disk):
        report = HealthChecker(db_path=tmp_path / "absent.db").run_all()
        assert report.status == HealthStatus.UNHEALTHY
        statuses = {c.name: c.status for c in report.checks}
        assert statuses["db"] == HealthStatus.UNHEALTHY
        assert statuses["schema_version"] == HealthStatus.UNHEALTHY

    def test_failing_check_is_unhealthy(self, fixture_db_path, roomy_disk):
        checker = HealthChecker(db_path=fixture_db_path)

        def broken():
            raise OSError("disk gone")

        checker.add_check("extra", broken)
        report = checker.run_all()
        extra = report.checks[-1]
        assert extra.status == HealthStatus.UNHEALTHY
        assert "disk gone" in extra.message

    def test_full_disk(self, fixture_db_path, monkeypatch):
        monkeypatch.setattr(
            "lib.observability.health.shutil.disk_usage", lambda path: DiskUsage(100, 96, 4)
        )
        report = HealthChecker(db_path=fixture_db_path).run_all()
        assert report.status == HealthStatus.UNHEALTHY

    def test_to_dict(self, fixture_db_path, roomy_disk):
        checker = HealthChecker(db_path=fixture_db_path)
        checker.add_check(
            "custom",
            lambda: HealthCheckResult("custom", HealthStatus.HEALTHY, "ok", details={"n": 1}),
        )
        data = checker.run_all().to_dict()
        custom = data["checks"][-1]
        assert custom["name"] == "custom"
        assert custom["status"] == "healthy"
        assert custom["n"] == 1
        assert data["timestamp"].endswith("Z")
