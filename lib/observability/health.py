"""
Health checks: database reachability, schema version, critical tables and
generation configuration.
"""

import logging
import shutil
import sqlite3
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from lib import config, paths, schema

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheckResult:
    name: str
    status: HealthStatus
    message: str
    latency_ms: float = 0
    details: dict = field(default_factory=dict)


@dataclass
class HealthReport:
    status: HealthStatus
    checks: list[HealthCheckResult]
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "checks": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": round(c.latency_ms, 2),
                    **c.details,
                }
                for c in self.checks
            ],
        }


class HealthChecker:
    """
    Runs every registered check; the worst status wins.

        checker = HealthChecker()
        report = checker.run_all()
    """

    def __init__(self, db_path: str | Path | None = None):
        self.db_path = Path(db_path) if db_path else paths.db_path()
        self._checks: dict[str, Callable[[], HealthCheckResult]] = {}
        self.add_check("db", self._check_db)
        self.add_check("schema_version", self._check_schema_version)
        self.add_check("critical_tables", self._check_critical_tables)
        self.add_check("anthropic", self._check_anthropic)
        self.add_check("disk_space", self._check_disk_space)

    def add_check(self, name: str, check_fn: Callable[[], HealthCheckResult]) -> None:
        self._checks[name] = check_fn

    def run_all(self) -> HealthReport:
        results = []
        overall_status = HealthStatus.HEALTHY

        for name, check_fn in self._checks.items():
            start = time.monotonic()
            try:
                result = check_fn()
            except (sqlite3.Error, OSError) as e:
                logger.error("Health check '%s' failed", name, exc_info=e)
                result = HealthCheckResult(
                    name=name, status=HealthStatus.UNHEALTHY, message=f"Check failed: {e}"
                )
            result.latency_ms = (time.monotonic() - start) * 1000
            results.append(result)

            if result.status == HealthStatus.UNHEALTHY:
                overall_status = HealthStatus.UNHEALTHY
            elif (
                result.status == HealthStatus.DEGRADED and overall_status != HealthStatus.UNHEALTHY
            ):
                overall_status = HealthStatus.DEGRADED

        return HealthReport(
            status=overall_status,
            checks=results,
            timestamp=datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        )

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True, timeout=5)

    def _check_db(self) -> HealthCheckResult:
        if not self.db_path.exists():
            return HealthCheckResult(
                name="db",
                status=HealthStatus.UNHEALTHY,
                message="Database file missing",
                details={"path": str(self.db_path)},
            )
        conn = self._connect()
        try:
            conn.execute("SELECT 1")
        finally:
            conn.close()
        return HealthCheckResult(
            name="db",
            status=HealthStatus.HEALTHY,
            message="Database connection OK",
            details={"path": str(self.db_path)},
        )

    def _check_schema_version(self) -> HealthCheckResult:
        conn = self._connect()
        try:
            version = conn.execute("PRAGMA user_version").fetchone()[0]
        finally:
            conn.close()

        if version != schema.SCHEMA_VERSION:
            logger.warning("Schema version mismatch: %s != %s", version, schema.SCHEMA_VERSION)
            return HealthCheckResult(
                name="schema_version",
                status=HealthStatus.DEGRADED,
                message=f"Schema version mismatch: {version} != {schema.SCHEMA_VERSION}",
                details={"current": version, "expected": schema.SCHEMA_VERSION},
            )
        return HealthCheckResult(
            name="schema_version",
            status=HealthStatus.HEALTHY,
            message=f"Schema version: {version}",
            details={"version": version},
        )

    def _check_critical_tables(self) -> HealthCheckResult:
        conn = self._connect()
        try:
            present = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            }
        finally:
            conn.close()

        missing = [t for t in schema.CRITICAL_TABLES if t not in present]
        if missing:
            return HealthCheckResult(
                name="critical_tables",
                status=HealthStatus.UNHEALTHY,
                message=f"Missing tables: {', '.join(missing)}",
                details={"missing": missing},
            )
        return HealthCheckResult(
            name="critical_tables",
            status=HealthStatus.HEALTHY,
            message=f"{len(schema.CRITICAL_TABLES)} critical tables present",
        )

    def _check_anthropic(self) -> HealthCheckResult:
        # Without a key only retroplanning generation is unavailable
        if not config.ANTHROPIC_API_KEY:
            return HealthCheckResult(
                name="anthropic",
                status=HealthStatus.DEGRADED,
                message="ANTHROPIC_API_KEY not set; generation disabled",
            )
        return HealthCheckResult(
            name="anthropic",
            status=HealthStatus.HEALTHY,
            message="API key configured",
            details={"model": config.ANTHROPIC_MODEL},
        )

    def _check_disk_space(self) -> HealthCheckResult:
        total, used, free = shutil.disk_usage(str(self.db_path.parent))
        percent_used = (used / total) * 100 if total > 0 else 0
        details = {"free_bytes": free, "percent_used": round(percent_used, 2)}

        if percent_used > 95:
            status = HealthStatus.UNHEALTHY
        elif percent_used > 90:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.HEALTHY
        return HealthCheckResult(
            name="disk_space",
            status=status,
            message=f"Disk space: {percent_used:.1f}% used",
            details=details,
        )
