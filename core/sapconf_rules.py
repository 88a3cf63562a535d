"""
    Rules for sapconf.

    sapconf 4 (4.1.12 up to 5.0) applies its settings through tuned and its
    own sapconf.service, which starts tuned with the "sapconf" profile.
    sapconf 5 works without tuned; tuned running next to it means two tools
    fight over the same kernel settings.
"""
from __future__ import annotations
from typing import Any

from core.models import FactSnapshot
from core.rules import Outcome, Rule, RuleEngine, exclusivity_rules, unit_state
from core.versions import SapconfTier

EXPECTED_PROFILE = "sapconf"
DEPRECATED_PROFILES = ("sap-hana", "sap-netweaver", "sap-ase", "sap-bobj")


def _values(snapshot: FactSnapshot) -> dict[str, Any]:
    return {"tuned_profile": snapshot.profile("tuned")}


def _tuned_package(snapshot: FactSnapshot) -> str:
    return "installed" if snapshot.installed("tuned") else "missing"


def _tuned_follows_sapconf(snapshot: FactSnapshot) -> str | None:
    sapconf_active = snapshot.active("sapconf.service") == "active"
    tuned_active = snapshot.active("tuned.service") == "active"
    if sapconf_active and tuned_active:
        return "both"
    if sapconf_active:
        return "tuned-down"
    if tuned_active:
        return "tuned-alone"
    # both down: sapconf.service has been reported already
    return None


def _tuned_enabled_with_sapconf(snapshot: FactSnapshot) -> str | None:
    sapconf_enabled = snapshot.enabled("sapconf.service") == "enabled"
    tuned_enabled = snapshot.enabled("tuned.service") == "enabled"
    if tuned_enabled:
        return "both" if sapconf_enabled else "tuned-alone"
    return "pulled-in" if sapconf_enabled else None


def _tuned_profile(snapshot: FactSnapshot) -> str:
    profile = snapshot.profile("tuned")
    if profile is None:
        return "unset"
    if profile == EXPECTED_PROFILE:
        return "current"
    if profile in DEPRECATED_PROFILES:
        return "deprecated"
    return "other"


def _tuned_standalone(snapshot: FactSnapshot) -> str:
    if snapshot.active("tuned.service") != "active":
        return "inactive"
    return "conflict" if snapshot.active("sapconf.service") == "active" else "active"


SAPCONF_SERVICE_RULES = (
    Rule("sapconf-enabled", "sapconf.service", unit_state("sapconf.service", "enabled"), {
        "enabled": Outcome("OK", "sapconf.service is enabled."),
        "disabled": Outcome("FAIL", "sapconf.service is disabled.", "enable-sapconf"),
        "missing": Outcome("FAIL", "sapconf.service is not known to systemd.", "enable-sapconf"),
    }),
    Rule("sapconf-active", "sapconf.service", unit_state("sapconf.service", "active"), {
        "active": Outcome("OK", "sapconf.service is active."),
        "inactive": Outcome("FAIL", "sapconf.service is inactive.", "start-sapconf"),
        "missing": Outcome("FAIL", "sapconf.service is not known to systemd.", "start-sapconf"),
    }),
)

WITH_TUNED_RULES = exclusivity_rules("saptune") + (
    Rule("tuned-package", "tuned", _tuned_package, {
        "installed": Outcome("OK", "tuned package is installed."),
        "missing": Outcome("FAIL", "tuned package is missing, but sapconf 4 needs it.", "install-tuned"),
    }),
) + SAPCONF_SERVICE_RULES + (
    Rule("tuned-active", "tuned.service", _tuned_follows_sapconf, {
        "both": Outcome("OK", "tuned.service is active."),
        "tuned-down": Outcome("FAIL", "tuned.service is inactive, although sapconf.service is active.",
                              "restart-sapconf"),
        "tuned-alone": Outcome("WARN", "tuned.service is active, although sapconf.service is not.",
                               "tuned-without-sapconf"),
    }, unless=("tuned-package",)),
    Rule("tuned-enabled", "tuned.service", _tuned_enabled_with_sapconf, {
        "both": Outcome("OK", "tuned.service is enabled."),
        "pulled-in": Outcome("OK", "tuned.service is disabled, sapconf.service starts it."),
        "tuned-alone": Outcome("WARN", "tuned.service is enabled, although sapconf.service is not.",
                               "tuned-enabled-without-sapconf"),
    }, unless=("tuned-package",)),
    Rule("tuned-profile", "tuned profile", _tuned_profile, {
        "current": Outcome("OK", "tuned profile 'sapconf' is set."),
        "deprecated": Outcome("WARN", "tuned profile '{tuned_profile}' is set, which is deprecated.",
                              "replace-deprecated-profile"),
        "unset": Outcome("FAIL", "No tuned profile is set.", "set-sapconf-profile"),
        "other": Outcome("FAIL", "tuned profile '{tuned_profile}' is set, but 'sapconf' is expected.",
                         "set-sapconf-profile"),
    }, unless=("tuned-package",)),
)

STANDALONE_RULES = exclusivity_rules("saptune") + SAPCONF_SERVICE_RULES + (
    Rule("tuned-inactive", "tuned.service", _tuned_standalone, {
        "inactive": Outcome("OK", "tuned.service is inactive."),
        "conflict": Outcome("FAIL", "tuned.service is active next to sapconf.service, "
                                    "both change the same settings.", "stop-tuned"),
        "active": Outcome("WARN", "tuned.service is active, sapconf 5 does not use tuned.", "stop-tuned"),
    }),
    Rule("tuned-disabled", "tuned.service", unit_state("tuned.service", "enabled"), {
        "enabled": Outcome("WARN", "tuned.service is enabled, sapconf 5 does not use tuned.", "disable-tuned"),
        "disabled": Outcome("OK", "tuned.service is disabled."),
        "missing": None,
    }),
)

ENGINES: dict[SapconfTier, RuleEngine] = {
    SapconfTier.WITH_TUNED: RuleEngine("sapconf-4", WITH_TUNED_RULES, _values),
    SapconfTier.STANDALONE: RuleEngine("sapconf-5", STANDALONE_RULES, _values),
}
