# core/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Any, Mapping, get_args

from core.errors import UnknownStateError

Severity = Literal["OK", "NOTE", "WARN", "FAIL"]
Status = Literal["ok", "warn", "fail", "not-installed"]
ActiveState = Literal["active", "inactive", "missing"]
EnabledState = Literal["enabled", "disabled", "missing"]

SERVICE_STATES: dict[str, tuple[str, ...]] = {
    "service_active": get_args(ActiveState),
    "service_enabled": get_args(EnabledState),
}
HINTED_SEVERITIES = ("WARN", "FAIL")


@dataclass(frozen=True)
class OsRelease:
    major: int
    minor: int = 0

    def __str__(self) -> str:
        return f"{self.major} SP{self.minor}" if self.minor else str(self.major)


@dataclass(frozen=True)
class Finding:
    severity: Severity
    subject: str
    message: str
    hint: str | None = None

    def __post_init__(self):
        if self.severity not in ("OK", "NOTE", "WARN", "FAIL"):
            raise ValueError(f"unknown severity {self.severity!r}")
        if (self.severity in HINTED_SEVERITIES) != (self.hint is not None):
            raise ValueError(f"{self.severity} finding for {self.subject!r} must "
                             f"{'carry' if self.severity in HINTED_SEVERITIES else 'not carry'} a hint")


def _frozen(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class FactSnapshot:
    """
    Everything the checks know about the host.

    Built once by the collectors (or by tests) and never changed afterwards.
    Lookups of unknown packages/units/tools fall back to "not there":
    ``None`` for versions and profiles, ``"missing"`` for service states.
    """
    os_release: OsRelease
    package_version: Mapping[str, str | None] = field(default_factory=dict)
    service_active: Mapping[str, ActiveState] = field(default_factory=dict)
    service_enabled: Mapping[str, EnabledState] = field(default_factory=dict)
    tool_profile: Mapping[str, str | None] = field(default_factory=dict)
    configured_tool_version: str | None = None
    existing_paths: frozenset[str] = frozenset()
    file_text: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for name, known in SERVICE_STATES.items():
            for unit, state in (getattr(self, name) or {}).items():
                if state not in known:
                    raise UnknownStateError(f"{unit}: unrecognized {name.split('_')[1]} state {state!r}")
        for name in ("package_version", "service_active", "service_enabled", "tool_profile", "file_text"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        object.__setattr__(self, "existing_paths", frozenset(self.existing_paths))

    def version(self, package: str) -> str | None:
        return self.package_version.get(package) or None

    def installed(self, package: str) -> bool:
        return self.version(package) is not None

    def active(self, unit: str) -> ActiveState:
        return self.service_active.get(unit, "missing")

    def enabled(self, unit: str) -> EnabledState:
        return self.service_enabled.get(unit, "missing")

    def profile(self, tool: str) -> str | None:
        value = self.tool_profile.get(tool)
        return (value.strip() or None) if value else None

    def exists(self, path: str) -> bool:
        return path in self.existing_paths


@dataclass
class CheckResult:
    subsystem: str
    status: Status
    version: str | None = None
    tier: str | None = None
    findings: list[Finding] = field(default_factory=list)
    warnings: int = 0
    failures: int = 0
    summary: list[str] = field(default_factory=list)
