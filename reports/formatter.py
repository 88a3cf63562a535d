"""
    Report formatting functions
"""
import click

from core.models import CheckResult, Finding

LABELS = {
    "OK": ("[ OK ]", "green"),
    "NOTE": ("[NOTE]", "cyan"),
    "WARN": ("[WARN]", "yellow"),
    "FAIL": ("[FAIL]", "red"),
}


def format_finding(finding: Finding, color: bool = True) -> str:
    label, fg = LABELS[finding.severity]
    if color:
        label = click.style(label, fg=fg, bold=finding.severity == "FAIL")
    line = f"{label} {finding.message}"
    if finding.hint:
        line += f" -> {finding.hint}"
    return line


def format_result(result: CheckResult, color: bool = True, show_non_ok: bool = False) -> list[str]:
    """Finding lines in emission order, then the summary."""
    header = f"Checking {result.subsystem}"
    if result.version:
        header += f" {result.version}"
    lines = [header + ":"]

    for finding in result.findings:
        if show_non_ok and finding.severity == "OK":
            continue
        lines.append(format_finding(finding, color))

    lines.append("")
    lines.extend(result.summary)
    return lines


def format_overview(facts: dict, host: dict) -> list[str]:
    lines = ["Host:"]
    lines += [f"  {key}: {value}" for key, value in host.items()]
    lines.append(f"\nSLES release: {facts['os_release']}")

    lines.append("\nPackages:")
    for name, version in facts["packages"].items():
        lines.append(f"  {name}: {version or 'not installed'}")

    lines.append("\nServices:")
    for unit, state in facts["services"].items():
        lines.append(f"  {unit}: {state['active']}/{state['enabled']}")

    lines.append("\nProfiles:")
    for tool, profile in facts["profiles"].items():
        lines.append(f"  {tool}: {profile or '-'}")
    lines.append(f"  SAPTUNE_VERSION: {facts['configured_saptune_version'] or '-'}")
    return lines
