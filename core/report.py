import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.models import CheckResult


def build_report(result: CheckResult, host: dict[str, Any]) -> dict[str, Any]:
    return {
        "meta": {"generated": datetime.now(timezone.utc).isoformat(timespec="seconds")},
        "host": host,
        "check": asdict(result),
    }


def write_json_report(report: dict[str, Any], out_path: str | Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with out_path.open("w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)

    return out_path
