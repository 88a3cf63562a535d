"""
    Rule tables.

    A rule looks at the snapshot and names an outcome; the outcome decides
    severity, message and (for WARN/FAIL) the remediation hint. Rules run in
    table order, which is the order the problems should be fixed in.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from core.errors import RuleTableError
from core.models import FactSnapshot, Finding, Severity

logger = logging.getLogger(__name__)

# Remediation hints, keyed by the failure they fix.
HINTS: dict[str, str] = {
    "stop-sapconf": "Run 'systemctl stop sapconf.service' to stop sapconf.",
    "disable-sapconf": "Run 'systemctl disable sapconf.service' to disable sapconf.",
    "start-sapconf": "Run 'systemctl start sapconf.service' to start sapconf.",
    "enable-sapconf": "Run 'systemctl enable sapconf.service' to enable sapconf.",
    "restart-sapconf": "Run 'systemctl restart sapconf.service' so sapconf starts tuned again.",
    "stop-saptune": "Run 'systemctl stop saptune.service' to stop saptune.",
    "disable-saptune": "Run 'systemctl disable saptune.service' to disable saptune.",
    "start-saptune": "Run 'saptune service start' to start saptune.",
    "enable-saptune": "Run 'saptune service enable' to enable saptune.",
    "install-tuned": "Run 'zypper install tuned' to install tuned.",
    "stop-tuned": "Run 'systemctl stop tuned.service' to stop tuned.",
    "disable-tuned": "Run 'systemctl disable tuned.service' to disable tuned.",
    "tuned-without-sapconf": "Start sapconf with 'systemctl start sapconf.service' or stop tuned with "
                             "'systemctl stop tuned.service'.",
    "tuned-enabled-without-sapconf": "Enable sapconf with 'systemctl enable sapconf.service' or disable tuned "
                                     "with 'systemctl disable tuned.service'.",
    "set-sapconf-profile": "Run 'tuned-adm profile sapconf' to set the sapconf profile.",
    "replace-deprecated-profile": "Run 'tuned-adm profile sapconf', the SAP product profiles are deprecated.",
    "daemon-start": "Run 'saptune daemon start' to start tuned with the saptune profile.",
    "takeover-tuned": "Run 'saptune service takeover' to stop and disable tuned.",
    "migrate-saptune": "Migrate the configuration as described in man page saptune-migrate(7).",
    "reinstall-saptune": "Reinstall saptune with 'zypper install -f saptune' to restore /etc/sysconfig/saptune.",
    "change-solution": "Revert the obsolete solution with 'saptune solution revert {solution}' and apply a "
                       "current one.",
}


@dataclass(frozen=True)
class Outcome:
    severity: Severity
    message: str
    hint: str | None = None

    def finding(self, subject: str, values: Mapping[str, Any]) -> Finding:
        hint = HINTS[self.hint].format(**values) if self.hint else None
        return Finding(self.severity, subject, self.message.format(**values), hint)


@dataclass(frozen=True)
class Rule:
    id: str
    subject: str
    check: Callable[[FactSnapshot], str | None]
    outcomes: Mapping[str, Outcome | None]   # None: known state, nothing to report
    unless: tuple[str, ...] = ()


@dataclass
class RuleEngine:
    """Runs one rule table against a snapshot. One instance per subsystem tier."""
    name: str
    rules: tuple[Rule, ...]
    values: Callable[[FactSnapshot], dict[str, Any]] = field(default=lambda snapshot: {})

    def __post_init__(self):
        for rule in self.rules:
            for key, outcome in rule.outcomes.items():
                if outcome is not None and outcome.hint is not None and outcome.hint not in HINTS:
                    raise RuleTableError(f"{self.name}/{rule.id}/{key}: unknown hint {outcome.hint!r}")

    def evaluate(self, snapshot: FactSnapshot) -> list[Finding]:
        values = self.values(snapshot)
        findings: list[Finding] = []
        broken: set[str] = set()

        for rule in self.rules:
            if broken.intersection(rule.unless):
                logger.debug("%s: skipping %s, depends on %s", self.name, rule.id, rule.unless)
                continue
            key = rule.check(snapshot)
            if key is None:
                continue
            if key not in rule.outcomes:
                raise RuleTableError(f"{self.name}/{rule.id}: no outcome for {key!r}")
            outcome = rule.outcomes[key]
            if outcome is None:
                continue
            finding = outcome.finding(rule.subject, values)
            if finding.severity in ("WARN", "FAIL"):
                broken.add(rule.id)
            findings.append(finding)
        return findings


def unit_state(unit: str, kind: str) -> Callable[[FactSnapshot], str]:
    """Check function returning the active or enabled state of a unit."""
    if kind == "active":
        return lambda snapshot: snapshot.active(unit)
    return lambda snapshot: snapshot.enabled(unit)


def exclusivity_rules(other: str) -> tuple[Rule, ...]:
    """The service of the other tool must be stopped and disabled."""
    unit = f"{other}.service"
    return (
        Rule(f"{other}-inactive", unit, unit_state(unit, "active"), {
            "active": Outcome("FAIL", f"{unit} is active. {other} must not run together with this tool.",
                              f"stop-{other}"),
            "inactive": Outcome("OK", f"{unit} is inactive."),
            "missing": Outcome("OK", f"{unit} is not installed."),
        }),
        Rule(f"{other}-disabled", unit, unit_state(unit, "enabled"), {
            "enabled": Outcome("FAIL", f"{unit} is enabled. {other} must not be started at boot.",
                               f"disable-{other}"),
            "disabled": Outcome("OK", f"{unit} is disabled."),
            "missing": None,
        }),
    )


def solution_state(markers: tuple[str, ...]) -> Callable[[FactSnapshot], str]:
    def check(snapshot: FactSnapshot) -> str:
        solution = snapshot.profile("saptune")
        if solution is None:
            return "unset"
        if any(marker in solution for marker in markers):
            return "obsolete"
        return "set"
    return check

