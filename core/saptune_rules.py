"""
    Rules for saptune.

    saptune 2 runs its tunings through tuned with the "saptune" profile
    ('saptune daemon start'). saptune 3 brings its own saptune.service and
    tuned must stay out of the way ('saptune service takeover').
"""
from __future__ import annotations
from typing import Any, Callable

from core.models import FactSnapshot
from core.rules import Outcome, Rule, RuleEngine, exclusivity_rules, solution_state, unit_state
from core.versions import SaptuneTier

EXPECTED_PROFILE = "saptune"

# Solutions saptune still accepts but which are no longer maintained.
OBSOLETE_SOLUTION_MARKERS = ("MAXDB",)


def _values(snapshot: FactSnapshot) -> dict[str, Any]:
    return {
        "tuned_profile": snapshot.profile("tuned"),
        "solution": snapshot.profile("saptune"),
        "configured_version": snapshot.configured_tool_version,
    }


def _tuned_package(snapshot: FactSnapshot) -> str:
    return "installed" if snapshot.installed("tuned") else "missing"


def _tuned_profile(snapshot: FactSnapshot) -> str:
    profile = snapshot.profile("tuned")
    if profile is None:
        return "unset"
    return "current" if profile == EXPECTED_PROFILE else "other"


def _configured_version(expected: str) -> Callable[[FactSnapshot], str]:
    def check(snapshot: FactSnapshot) -> str:
        configured = (snapshot.configured_tool_version or "").strip()
        if not configured:
            return "unset"
        if configured == expected:
            return "current"
        return "compat" if configured == "1" else "other"
    return check


def _version_rule(expected: str) -> Rule:
    return Rule("saptune-version", "SAPTUNE_VERSION", _configured_version(expected), {
        "current": Outcome("OK", f"saptune is configured to run as version {expected}."),
        "compat": Outcome("FAIL", "saptune is configured to run in version 1 compatibility mode.",
                          "migrate-saptune"),
        "unset": Outcome("WARN", "SAPTUNE_VERSION is not set in /etc/sysconfig/saptune.", "reinstall-saptune"),
        "other": Outcome("FAIL", "SAPTUNE_VERSION is set to '{configured_version}', "
                                 f"but '{expected}' is expected.", "reinstall-saptune"),
    })


# Unlike the tuned profile, an unset solution is not an error: saptune applies
# single notes without one. Any solution name is accepted unless it carries an
# obsolete marker.
SOLUTION_RULE = Rule("saptune-solution", "saptune solution", solution_state(OBSOLETE_SOLUTION_MARKERS), {
    "set": Outcome("OK", "Solution '{solution}' is configured."),
    "obsolete": Outcome("WARN", "Solution '{solution}' is obsolete.", "change-solution"),
    "unset": Outcome("NOTE", "No solution is configured, only SAP notes will be applied."),
})

WITH_TUNED_RULES = exclusivity_rules("sapconf") + (
    Rule("tuned-package", "tuned", _tuned_package, {
        "installed": Outcome("OK", "tuned package is installed."),
        "missing": Outcome("FAIL", "tuned package is missing, but saptune 2 needs it.", "install-tuned"),
    }),
    Rule("tuned-active", "tuned.service", unit_state("tuned.service", "active"), {
        "active": Outcome("OK", "tuned.service is active."),
        "inactive": Outcome("FAIL", "tuned.service is inactive.", "daemon-start"),
        "missing": Outcome("FAIL", "tuned.service is not known to systemd.", "daemon-start"),
    }, unless=("tuned-package",)),
    Rule("tuned-enabled", "tuned.service", unit_state("tuned.service", "enabled"), {
        "enabled": Outcome("OK", "tuned.service is enabled."),
        "disabled": Outcome("WARN", "tuned.service is disabled, saptune will not tune after a reboot.",
                            "daemon-start"),
        "missing": None,
    }, unless=("tuned-package",)),
    Rule("tuned-profile", "tuned profile", _tuned_profile, {
        "current": Outcome("OK", "tuned profile 'saptune' is set."),
        "unset": Outcome("FAIL", "No tuned profile is set.", "daemon-start"),
        "other": Outcome("FAIL", "tuned profile '{tuned_profile}' is set, but 'saptune' is expected.",
                         "daemon-start"),
    }, unless=("tuned-package",)),
    _version_rule("2"),
    SOLUTION_RULE,
)

STANDALONE_RULES = exclusivity_rules("sapconf") + (
    Rule("saptune-enabled", "saptune.service", unit_state("saptune.service", "enabled"), {
        "enabled": Outcome("OK", "saptune.service is enabled."),
        "disabled": Outcome("FAIL", "saptune.service is disabled.", "enable-saptune"),
        "missing": Outcome("FAIL", "saptune.service is not known to systemd.", "enable-saptune"),
    }),
    Rule("saptune-active", "saptune.service", unit_state("saptune.service", "active"), {
        "active": Outcome("OK", "saptune.service is active."),
        "inactive": Outcome("FAIL", "saptune.service is inactive.", "start-saptune"),
        "missing": Outcome("FAIL", "saptune.service is not known to systemd.", "start-saptune"),
    }),
    Rule("tuned-inactive", "tuned.service", unit_state("tuned.service", "active"), {
        "active": Outcome("FAIL", "tuned.service is active, saptune 3 does not use tuned.", "takeover-tuned"),
        "inactive": Outcome("OK", "tuned.service is inactive."),
        "missing": None,
    }),
    Rule("tuned-disabled", "tuned.service", unit_state("tuned.service", "enabled"), {
        "enabled": Outcome("WARN", "tuned.service is enabled, saptune 3 does not use tuned.", "takeover-tuned"),
        "disabled": Outcome("OK", "tuned.service is disabled."),
        "missing": None,
    }),
    _version_rule("3"),
    SOLUTION_RULE,
)

ENGINES: dict[SaptuneTier, RuleEngine] = {
    SaptuneTier.WITH_TUNED: RuleEngine("saptune-2", WITH_TUNED_RULES, _values),
    SaptuneTier.STANDALONE: RuleEngine("saptune-3", STANDALONE_RULES, _values),
}
