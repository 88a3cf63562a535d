"""
    The check pipeline for one subsystem:

        version classification -> file-set audit -> rules -> aggregation

    Every subsystem check starts from scratch against the same snapshot, so
    checking sapconf and saptune in one run cannot influence each other.
"""
from __future__ import annotations
import logging
from typing import Any

from core import sapconf_rules, saptune_rules
from core.aggregate import FindingAggregator
from core.filesets import audit_files, resolve_file_set
from core.models import CheckResult, FactSnapshot
from core.versions import classify

logger = logging.getLogger(__name__)

SUBSYSTEMS = ("sapconf", "saptune")

_ENGINES = {
    "sapconf": sapconf_rules.ENGINES,
    "saptune": saptune_rules.ENGINES,
}


def check(subsystem: str, snapshot: FactSnapshot) -> CheckResult:
    """Evaluate one subsystem. Raises CheckerError subclasses on engine-fatal problems."""
    if subsystem not in _ENGINES:
        raise ValueError(f"unknown subsystem {subsystem!r}")

    classification = classify(subsystem, snapshot.version(subsystem))
    if classification.not_installed:
        logger.info("%s is not installed", subsystem)
        return CheckResult(subsystem, "not-installed",
                           summary=[f"{subsystem} is not installed."])

    tier_name = classification.tier.name if classification.tier is not None else None
    aggregator = FindingAggregator(subsystem)

    if classification.terminal is not None:
        logger.info("%s %s ends the check: %s", subsystem, classification.version, tier_name or "unparsable")
        aggregator.add(classification.terminal)
    else:
        logger.debug("checking %s %s as %s (%s) on SLES %s", subsystem, classification.version,
                     tier_name, classification.tag, snapshot.os_release)
        file_set = resolve_file_set(snapshot.os_release.major, classification.tag)
        aggregator.extend(audit_files(file_set, snapshot, classification.tag))
        aggregator.extend(_ENGINES[subsystem][classification.tier].evaluate(snapshot))

    return CheckResult(
        subsystem=subsystem,
        status=aggregator.status,
        version=classification.version,
        tier=tier_name,
        findings=list(aggregator.findings),
        warnings=aggregator.warnings,
        failures=aggregator.failures,
        summary=aggregator.summary(),
    )


def overview(snapshot: FactSnapshot) -> dict[str, Any]:
    """The raw facts, without any evaluation."""
    units = sorted(set(snapshot.service_active) | set(snapshot.service_enabled))
    return {
        "os_release": str(snapshot.os_release),
        "packages": {name: snapshot.version(name) for name in sorted(snapshot.package_version)},
        "services": {unit: {"active": snapshot.active(unit), "enabled": snapshot.enabled(unit)} for unit in units},
        "profiles": {tool: snapshot.profile(tool) for tool in sorted(snapshot.tool_profile)},
        "configured_saptune_version": snapshot.configured_tool_version,
    }
