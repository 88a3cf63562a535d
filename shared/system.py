"""
    Host identification: which SLES release are we on, and can it be checked at all.
"""
import os
import platform

from collectors.linux.linux_tuning import get_linux_os_release, to_os_release
from core.errors import UnsupportedHostError
from core.models import OsRelease

SUPPORTED_IDS = ("sles", "sles_sap")
SUPPORTED_MAJORS = (12, 15)


def get_system_info():
    """Retrieve basic system information for the overview."""
    system_info = {
        "os": platform.system(),
        "kernel": platform.release(),
        "machine": platform.machine(),
        "hostname": platform.node(),
    }
    return system_info


def get_os(root: str = "/") -> OsRelease:
    """
        Returns the SLES release of the host.
        Raises UnsupportedHostError for anything that is not SLES 12 or SLES 15,
        before any other fact gets collected.
    """
    if platform.system() != "Linux":
        raise UnsupportedHostError(f"{platform.system()} is not supported, only SLES 12 and SLES 15 are.")

    os_release = get_linux_os_release(os.path.join(root, "etc/os-release"))
    distro = os_release.get("ID", "")
    release = to_os_release(os_release.get("VERSION_ID", ""))
    if distro not in SUPPORTED_IDS or release is None or release.major not in SUPPORTED_MAJORS:
        name = os_release.get("PRETTY_NAME") or distro or "unknown distribution"
        raise UnsupportedHostError(f"{name} is not supported, only SLES 12 and SLES 15 are.")
    return release
