"""
    Version classification.

    Maps the installed package version of sapconf or saptune to the tier that
    selects the rule set and file set, or to a terminal finding that ends the
    check right away.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from enum import IntEnum

from core.errors import VersionTierError
from core.models import Finding

VersionTriple = tuple[int, int, int]

_VERSION_RE = re.compile(r"^\s*(\d+)\.(\d+)(?:\.(\d+))?")


class SapconfTier(IntEnum):
    UNSUPPORTED = 0
    WITH_TUNED = 1
    STANDALONE = 2
    NEWER = 3


class SaptuneTier(IntEnum):
    UNSUPPORTED = 0
    WITH_TUNED = 1
    STANDALONE = 2
    NEWER = 3


@dataclass(frozen=True)
class TierRange:
    tier: IntEnum
    low: VersionTriple | None
    high: VersionTriple | None   # exclusive

    def contains(self, version: VersionTriple) -> bool:
        if self.low is not None and version < self.low:
            return False
        if self.high is not None and version >= self.high:
            return False
        return True


TIER_RANGES: dict[str, tuple[TierRange, ...]] = {
    "sapconf": (
        TierRange(SapconfTier.UNSUPPORTED, None, (4, 1, 12)),
        TierRange(SapconfTier.WITH_TUNED, (4, 1, 12), (5, 0, 0)),
        TierRange(SapconfTier.STANDALONE, (5, 0, 0), (6, 0, 0)),
        TierRange(SapconfTier.NEWER, (6, 0, 0), None),
    ),
    "saptune": (
        TierRange(SaptuneTier.UNSUPPORTED, None, (2, 0, 0)),
        TierRange(SaptuneTier.WITH_TUNED, (2, 0, 0), (3, 0, 0)),
        TierRange(SaptuneTier.STANDALONE, (3, 0, 0), (4, 0, 0)),
        TierRange(SaptuneTier.NEWER, (4, 0, 0), None),
    ),
}

# Tiers that end the check with a single FAIL: (message, hint)
TERMINAL_TIERS: dict[tuple[str, str], tuple[str, str]] = {
    ("sapconf", "UNSUPPORTED"): (
        "sapconf version {version} is too old and not supported by this checker.",
        "Update sapconf to a maintained version with 'zypper update sapconf'.",
    ),
    ("sapconf", "NEWER"): (
        "sapconf version {version} is newer than the versions this checker supports.",
        "Use a newer version of this checker, or consider switching to saptune.",
    ),
    ("saptune", "UNSUPPORTED"): (
        "saptune version {version} (saptune v1) is superseded and not supported anymore.",
        "Migrate to saptune 3, see man page saptune-migrate(7).",
    ),
    ("saptune", "NEWER"): (
        "saptune version {version} is newer than the versions this checker supports.",
        "Use a newer version of this checker.",
    ),
}

# Tag used by the file-set resolver for every tier that gets fully evaluated.
TIER_TAGS: dict[tuple[str, str], str] = {
    ("sapconf", "WITH_TUNED"): "sapconf-4",
    ("sapconf", "STANDALONE"): "sapconf-5",
    ("saptune", "WITH_TUNED"): "saptune-2",
    ("saptune", "STANDALONE"): "saptune-3",
}


def parse_version(raw: str) -> VersionTriple | None:
    """Parse '4.1.12', '5.0' or '3.1.2-150400.3.9.1' into an integer triple."""
    m = _VERSION_RE.match(raw or "")
    if not m:
        return None
    major, minor, patch = m.groups()
    return int(major), int(minor), int(patch or 0)


@dataclass(frozen=True)
class Classification:
    """
    Result of classifying one package version.

    Exactly one of the three shapes applies:
      - not_installed: package absent, nothing to check
      - terminal: a single FAIL finding, nothing else gets checked
      - tier + tag: continue with file audit and rules
    """
    subsystem: str
    version: str | None
    tier: IntEnum | None = None
    tag: str | None = None
    terminal: Finding | None = None

    @property
    def not_installed(self) -> bool:
        return self.version is None


def classify(subsystem: str, raw_version: str | None) -> Classification:
    if not raw_version:
        return Classification(subsystem, None)

    triple = parse_version(raw_version)
    if triple is None:
        return Classification(subsystem, raw_version, terminal=Finding(
            "FAIL", subsystem,
            f"{subsystem} version {raw_version!r} is unknown to this checker.",
            f"Check the {subsystem} installation with 'rpm -qi {subsystem}'.",
        ))

    for tier_range in TIER_RANGES[subsystem]:
        if tier_range.contains(triple):
            break
    else:
        raise VersionTierError(f"{subsystem} version {raw_version} matches no tier")

    tier = tier_range.tier
    terminal = TERMINAL_TIERS.get((subsystem, tier.name))
    if terminal is not None:
        message, hint = terminal
        return Classification(subsystem, raw_version, tier=tier, terminal=Finding(
            "FAIL", subsystem, message.format(version=raw_version), hint,
        ))
    return Classification(subsystem, raw_version, tier=tier, tag=TIER_TAGS[(subsystem, tier.name)])
