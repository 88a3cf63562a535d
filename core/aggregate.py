from __future__ import annotations
from typing import Iterable

from core.models import Finding, Status

CLOSING = {
    "ok": "The {subsystem} setup is correct.",
    "warn": "The {subsystem} setup works, but some settings should be reviewed.",
    "fail": "The {subsystem} setup is not correct. Fix the errors above in the order they were reported.",
}


class FindingAggregator:
    """Collects the findings of one subsystem check in emission order."""

    def __init__(self, subsystem: str):
        self.subsystem = subsystem
        self.findings: list[Finding] = []
        self.warnings = 0
        self.failures = 0

    def add(self, finding: Finding) -> None:
        self.findings.append(finding)
        if finding.severity == "WARN":
            self.warnings += 1
        elif finding.severity == "FAIL":
            self.failures += 1

    def extend(self, findings: Iterable[Finding]) -> None:
        for finding in findings:
            self.add(finding)

    @property
    def status(self) -> Status:
        if self.failures:
            return "fail"
        if self.warnings:
            return "warn"
        return "ok"

    def summary(self) -> list[str]:
        lines = []
        if self.warnings:
            lines.append(f"{self.warnings} warning(s) have been found.")
        if self.failures:
            lines.append(f"{self.failures} error(s) have been found.")
        lines.append(CLOSING[self.status].format(subsystem=self.subsystem))
        return lines
