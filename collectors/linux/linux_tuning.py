from helpers.unix import run_cmd, get_evidence, read_text
import logging
import os
import shlex

from core.filesets import MIGRATION_FILE, probe_paths
from core.models import FactSnapshot, OsRelease

logger = logging.getLogger(__name__)

PACKAGES = ("sapconf", "saptune", "tuned")
UNITS = ("sapconf.service", "saptune.service", "tuned.service")

TUNED_ACTIVE_PROFILE = "/etc/tuned/active_profile"
SAPTUNE_SYSCONFIG = "/etc/sysconfig/saptune"

# systemctl has more states than the checks care about; fold them.
ACTIVE_STATES = {
    "active": "active",
    "reloading": "active",
    "activating": "active",
    "inactive": "inactive",
    "failed": "inactive",
    "deactivating": "inactive",
}
ENABLED_STATES = {
    "enabled": "enabled",
    "enabled-runtime": "enabled",
    "static": "enabled",
    "indirect": "enabled",
    "generated": "enabled",
    "alias": "enabled",
    "disabled": "disabled",
    "masked": "disabled",
    "masked-runtime": "disabled",
    "linked": "disabled",
    "linked-runtime": "disabled",
}


# -----------------------------
# 1) Key/value files
# -----------------------------
def parse_shell_vars(text: str) -> dict[str, str]:
    """
    Parse files like /etc/os-release or /etc/sysconfig/* :

      ID="sles"
      VERSION_ID="15.4"
      TUNE_FOR_SOLUTIONS="HANA"

    Comments and lines without "=" are skipped, quotes are removed.
    """
    values: dict[str, str] = {}
    for line in text.splitlines():
        s = line.strip()
        if not s or s.startswith("#") or "=" not in s:
            continue
        k, v = s.split("=", 1)
        try:
            tokens = shlex.split(v, comments=True)
        except ValueError:
            tokens = [v.strip().strip('"').strip("'")]
        values[k.strip()] = " ".join(tokens)
    return values


def get_linux_os_release(path: str = "/etc/os-release") -> dict[str, str]:
    text = read_text(path)
    if text is None:
        logger.warning("could not read %s", path)
        return {}
    return parse_shell_vars(text)


def to_os_release(version_id: str) -> OsRelease | None:
    """'15.4' -> OsRelease(15, 4), '12' -> OsRelease(12, 0)"""
    major, _, minor = (version_id or "").partition(".")
    if not major.isdigit():
        return None
    return OsRelease(int(major), int(minor) if minor.isdigit() else 0)


# -----------------------------
# 2) Packages and services
# -----------------------------
def get_package_version(package: str) -> str | None:
    """Version of an installed RPM, None if it is not installed."""
    cmd = ["rpm", "-q", "--queryformat", "%{VERSION}", package]
    rc, stdout, stderr = run_cmd(cmd)
    logger.debug("package %s: %s", package, get_evidence(cmd, rc, stdout, stderr))
    if rc != 0 or not stdout:
        return None
    return stdout


def get_service_state(unit: str) -> tuple[str, str]:
    """
    (active state, enabled state) of a systemd unit.

    A unit systemd has never heard of is "missing" in both. Unexpected
    states are passed on as they are, the snapshot rejects them.
    """
    cmd = ["systemctl", "show", "--property=LoadState", "--value", unit]
    rc, stdout, stderr = run_cmd(cmd)
    logger.debug("unit %s: %s", unit, get_evidence(cmd, rc, stdout, stderr))
    if rc != 0 or stdout in ("", "not-found"):
        return "missing", "missing"

    cmd = ["systemctl", "is-active", unit]
    rc, stdout, stderr = run_cmd(cmd)
    logger.debug("unit %s: %s", unit, get_evidence(cmd, rc, stdout, stderr))
    active = ACTIVE_STATES.get(stdout, stdout or "missing")

    cmd = ["systemctl", "is-enabled", unit]
    rc, stdout, stderr = run_cmd(cmd)
    logger.debug("unit %s: %s", unit, get_evidence(cmd, rc, stdout, stderr))
    enabled = ENABLED_STATES.get(stdout, stdout or "missing")

    return active, enabled


# -----------------------------
# 3) Files
# -----------------------------
def _under(root: str, path: str) -> str:
    return os.path.join(root, path.lstrip("/"))


def get_existing_paths(os_major: int, root: str = "/") -> frozenset[str]:
    return frozenset(path for path in probe_paths(os_major) if os.path.exists(_under(root, path)))


def get_tuned_profile(root: str = "/") -> str | None:
    text = read_text(_under(root, TUNED_ACTIVE_PROFILE))
    return (text.strip() or None) if text else None


def collect_snapshot(os_release: OsRelease, root: str = "/") -> FactSnapshot:
    """Gather every fact the checks need into one snapshot."""
    packages = {name: get_package_version(name) for name in PACKAGES}

    active: dict[str, str] = {}
    enabled: dict[str, str] = {}
    for unit in UNITS:
        active[unit], enabled[unit] = get_service_state(unit)

    saptune_text = read_text(_under(root, SAPTUNE_SYSCONFIG)) or ""
    saptune_vars = parse_shell_vars(saptune_text)

    file_text = {}
    migration_text = read_text(_under(root, MIGRATION_FILE))
    if migration_text:
        file_text[MIGRATION_FILE] = migration_text

    return FactSnapshot(
        os_release=os_release,
        package_version=packages,
        service_active=active,
        service_enabled=enabled,
        tool_profile={
            "tuned": get_tuned_profile(root),
            "saptune": saptune_vars.get("TUNE_FOR_SOLUTIONS") or None,
        },
        configured_tool_version=saptune_vars.get("SAPTUNE_VERSION") or None,
        existing_paths=get_existing_paths(os_release.major, root),
        file_text=file_text,
    )
