# tests/conftest.py
"""
Snapshot builders shared by the tests.

Each builder starts from a host where the given tool version is set up
correctly, so a test only spells out the facts it breaks.
"""

import pytest

from core.filesets import FILE_SETS
from core.models import FactSnapshot, OsRelease

HEALTHY = {
    "sapconf-4": dict(
        packages={"sapconf": "4.1.14", "tuned": "2.10.0"},
        active={"sapconf.service": "active", "tuned.service": "active"},
        enabled={"sapconf.service": "enabled", "tuned.service": "disabled"},
        profiles={"tuned": "sapconf"},
    ),
    "sapconf-5": dict(
        packages={"sapconf": "5.0.5", "tuned": "2.10.0"},
        active={"sapconf.service": "active", "tuned.service": "inactive"},
        enabled={"sapconf.service": "enabled", "tuned.service": "disabled"},
        profiles={},
    ),
    "saptune-2": dict(
        packages={"saptune": "2.0.3", "tuned": "2.10.0"},
        active={"tuned.service": "active"},
        enabled={"tuned.service": "enabled"},
        profiles={"tuned": "saptune", "saptune": "HANA"},
        configured="2",
    ),
    "saptune-3": dict(
        packages={"saptune": "3.1.2"},
        active={"saptune.service": "active", "tuned.service": "inactive"},
        enabled={"saptune.service": "enabled", "tuned.service": "disabled"},
        profiles={"saptune": "S4HANA-APPSERVER"},
        configured="3",
    ),
}


def build_snapshot(tag, os_major=15, packages=None, active=None, enabled=None, profiles=None,
                   configured="keep", paths=None, extra_paths=(), missing_paths=(), file_text=None):
    base = HEALTHY[tag]
    if paths is None:
        paths = set(FILE_SETS[(os_major, tag)].mandatory)
    paths = (set(paths) | set(extra_paths)) - set(missing_paths)
    return FactSnapshot(
        os_release=OsRelease(os_major, 4),
        package_version={**base["packages"], **(packages or {})},
        service_active={**base["active"], **(active or {})},
        service_enabled={**base["enabled"], **(enabled or {})},
        tool_profile={**base["profiles"], **(profiles or {})},
        configured_tool_version=base.get("configured") if configured == "keep" else configured,
        existing_paths=frozenset(paths),
        file_text=file_text or {},
    )


@pytest.fixture
def snapshot_for():
    """Factory fixture: snapshot_for("sapconf-4", active={...})"""
    return build_snapshot
