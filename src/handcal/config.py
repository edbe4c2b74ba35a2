from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

@dataclass
class AppConfig:
    timezone: str = "UTC"
    output: Optional[str] = None    # None writes to stdout
    strict: bool = False
    log_level: str = "INFO"

def load_config(path: str | None) -> AppConfig:
    if not path:
        return AppConfig()
    p = Path(path)
    data: Dict[str, Any] = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping.")

    output = data.get("output")
    return AppConfig(
        timezone=str(data.get("timezone") or "UTC"),
        output=str(output) if output else None,
        strict=bool(data.get("strict", False)),
        log_level=str(data.get("log_level", "INFO")).upper(),
    )
