"""
    File sets per (SLES major release, tag) and the audit of those files.
"""
from __future__ import annotations
from dataclasses import dataclass

from core.errors import FileSetError
from core.models import FactSnapshot, Finding

# Left behind by zypper/rpm when a modified config file gets updated.
UPDATE_SUFFIXES = (".rpmsave", ".rpmnew")

MIGRATION_FILE = "/etc/sysconfig/saptune"
MIGRATION_MARKER = "# saptune v1 migration helper"
MIGRATION_TAG = "saptune-3"


@dataclass(frozen=True)
class FileSetSpec:
    mandatory: frozenset[str] = frozenset()
    invalid: frozenset[str] = frozenset()
    customized_dirs: frozenset[str] = frozenset()

    def probe_paths(self) -> set[str]:
        """Every path the audit needs an existence fact for."""
        paths = set(self.customized_dirs)
        for path in self.mandatory | self.invalid:
            paths.add(path)
            paths.update(path + suffix for suffix in UPDATE_SUFFIXES)
        return paths


def _spec(mandatory=(), invalid=(), customized_dirs=()) -> FileSetSpec:
    return FileSetSpec(frozenset(mandatory), frozenset(invalid), frozenset(customized_dirs))


_SAPCONF_4 = _spec(
    mandatory=["/etc/sysconfig/sapconf", "/usr/lib/tuned/sapconf/tuned.conf", "/usr/lib/tuned/sapconf/script.sh"],
    invalid=["/usr/lib/sapconf/sapconf"],
    customized_dirs=["/etc/tuned/sapconf"],
)
_SAPCONF_5 = _spec(
    mandatory=["/etc/sysconfig/sapconf", "/usr/lib/sapconf/sapconf"],
    invalid=["/usr/lib/tuned/sapconf/tuned.conf", "/usr/lib/tuned/sapconf/script.sh",
             "/etc/tuned/sapconf/tuned.conf"],
)
_SAPTUNE_2 = _spec(
    mandatory=["/etc/sysconfig/saptune", "/usr/lib/tuned/saptune/tuned.conf", "/usr/lib/tuned/saptune/script.sh"],
    invalid=["/usr/lib/systemd/system/saptune.service"],
    customized_dirs=["/etc/tuned/saptune"],
)
_SAPTUNE_3 = _spec(
    mandatory=["/etc/sysconfig/saptune", "/usr/lib/systemd/system/saptune.service"],
    invalid=["/usr/lib/tuned/saptune/tuned.conf", "/usr/lib/tuned/saptune/script.sh",
             "/etc/tuned/saptune/tuned.conf"],
    customized_dirs=["/etc/saptune/override"],
)

# SLES 12 still ships the tuned-based sapconf profiles for the SAP products,
# which sapconf 4.1.12+ replaced by the single "sapconf" profile.
_SLES12_SAPCONF_LEFTOVERS = ["/usr/lib/tuned/sap-hana/tuned.conf", "/usr/lib/tuned/sap-netweaver/tuned.conf"]

FILE_SETS: dict[tuple[int, str], FileSetSpec] = {
    (12, "sapconf-4"): FileSetSpec(_SAPCONF_4.mandatory, _SAPCONF_4.invalid | frozenset(_SLES12_SAPCONF_LEFTOVERS),
                                   _SAPCONF_4.customized_dirs),
    (12, "sapconf-5"): FileSetSpec(_SAPCONF_5.mandatory, _SAPCONF_5.invalid | frozenset(_SLES12_SAPCONF_LEFTOVERS),
                                   _SAPCONF_5.customized_dirs),
    (12, "saptune-2"): _SAPTUNE_2,
    (12, "saptune-3"): _SAPTUNE_3,
    (15, "sapconf-4"): _SAPCONF_4,
    (15, "sapconf-5"): _SAPCONF_5,
    (15, "saptune-2"): _SAPTUNE_2,
    (15, "saptune-3"): _SAPTUNE_3,
}


def resolve_file_set(os_major: int, tag: str) -> FileSetSpec:
    try:
        return FILE_SETS[(os_major, tag)]
    except KeyError:
        raise FileSetError(f"no file set defined for SLES {os_major} and {tag}") from None


def probe_paths(os_major: int) -> set[str]:
    """All paths any tag on this release may ask about (used by the collectors)."""
    paths: set[str] = set()
    for (major, _tag), spec in FILE_SETS.items():
        if major == os_major:
            paths |= spec.probe_paths()
    return paths


def _leftovers(path: str, snapshot: FactSnapshot) -> list[Finding]:
    return [
        Finding("WARN", path + suffix, f"{path + suffix} is a leftover from a package update.",
                f"Merge your changes into {path} and remove {path + suffix}.")
        for suffix in UPDATE_SUFFIXES
        if snapshot.exists(path + suffix)
    ]


def audit_files(spec: FileSetSpec, snapshot: FactSnapshot, tag: str) -> list[Finding]:
    """Check a resolved file set against the existence facts of the snapshot."""
    findings: list[Finding] = []

    for path in sorted(spec.mandatory):
        if not snapshot.exists(path):
            findings.append(Finding("FAIL", path, f"{path} is missing, but mandatory.",
                                    "Check the installation by reinstalling the package."))
        findings.extend(_leftovers(path, snapshot))

    for path in sorted(spec.invalid):
        if snapshot.exists(path):
            findings.append(Finding("WARN", path,
                                    f"{path} is not used by this version. Maybe a leftover from an update?",
                                    f"Check the content of {path} and remove it."))
        findings.extend(_leftovers(path, snapshot))

    for path in sorted(spec.customized_dirs):
        if snapshot.exists(path):
            findings.append(Finding("NOTE", path, f"{path} exists. A customized profile is in use."))

    if tag == MIGRATION_TAG and MIGRATION_MARKER in snapshot.file_text.get(MIGRATION_FILE, ""):
        findings.append(Finding("WARN", MIGRATION_FILE,
                                f"{MIGRATION_FILE} still contains the saptune v1 migration helper.",
                                "Finish the migration as described in man page saptune-migrate(7)."))
    return findings
