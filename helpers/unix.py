import subprocess
from pathlib import Path

def run_cmd(cmd: list[str], timeout_s: int = 10) -> tuple[int, str, str]:
    """
    Run a query command (rpm, systemctl, ...) and return (rc, stdout, stderr).

    Missing binaries and hanging commands do not raise: they come back as
    rc 127 and rc 124, like a shell would report them. rpm and systemctl
    answer "not installed" / "not found" through the return code anyway, so
    callers only ever need to look at rc and stdout.
    """
    try:
        p = subprocess.run(cmd, text=True, capture_output=True, timeout=timeout_s)
    except FileNotFoundError as e:
        return 127, "", str(e)
    except subprocess.TimeoutExpired:
        return 124, "", f"timed out after {timeout_s}s"

    return p.returncode, (p.stdout or "").strip(), (p.stderr or "").strip()

def read_text(path: str | Path) -> str | None:
    """File content, or None if the file is absent or unreadable."""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None

def get_evidence(cmd, rc, stdout, stderr):
    # kept small, it ends up in debug logs
    return {"cmd": " ".join(cmd), "rc": rc, "stdout": stdout[:200], "stderr": stderr[:200]}
