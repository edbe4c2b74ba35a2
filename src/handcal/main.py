from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .calendar import Calendar
from .config import AppConfig, load_config

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_BAD_INPUT = 2


def load_events(path: str) -> List[Dict[str, Any]]:
    """Read event records from a YAML or JSON file.

    The document is either a list of mappings or a mapping with an ``events`` list.
    """
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("events") or []
    if not isinstance(data, list):
        raise ValueError(f"Events file {path} must contain a list of events.")
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Event #{i + 1} in {path} is not a mapping.")
    return data


def _resolve_config(config_path: Optional[str], timezone: Optional[str], output: Optional[str], strict: bool) -> AppConfig:
    cfg = load_config(config_path or os.environ.get("HANDCAL_CONFIG"))
    env_tz = os.environ.get("HANDCAL_TIMEZONE", "")
    if timezone:
        cfg.timezone = timezone
    elif env_tz:
        cfg.timezone = env_tz
    if output:
        cfg.output = output
    if strict:
        cfg.strict = True
    return cfg


def _write(text: str, output: Optional[str]) -> None:
    if not output:
        sys.stdout.write(text + "\n")
        return
    p = Path(output)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def run(
    events_path: str,
    config_path: Optional[str] = None,
    timezone: Optional[str] = None,
    output: Optional[str] = None,
    strict: bool = False,
) -> int:
    load_dotenv()
    try:
        cfg = _resolve_config(config_path, timezone, output, strict)
        logging.getLogger("handcal").setLevel(cfg.log_level)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Could not load config: %s", e)
        return EXIT_BAD_INPUT

    try:
        records = load_events(events_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Could not load events: %s", e)
        return EXIT_BAD_INPUT

    cal = Calendar.from_config(cfg)
    rejected = 0
    for i, record in enumerate(records, start=1):
        if not cal.add_event(record):
            rejected += 1
            logger.warning("Skipped event #%d (%s)", i, record.get("summary", "untitled"))

    logger.info("Added %d of %d events; default timezone=%s", len(cal), len(records), cfg.timezone)
    if rejected and cfg.strict:
        logger.error("%d event(s) rejected in strict mode; nothing written", rejected)
        return EXIT_REJECTED

    _write(cal.build(), cfg.output)
    return EXIT_OK


def main():
    import argparse

    ap = argparse.ArgumentParser(description="Build an iCalendar (.ics) document from event records")
    ap.add_argument("events", help="YAML or JSON file with a list of events")
    ap.add_argument("--config", default=None)
    ap.add_argument("--timezone", default=None, help="Default timezone for events without one")
    ap.add_argument("--output", default=None, help="Write here instead of stdout")
    ap.add_argument("--strict", action="store_true", help="Fail if any event is rejected")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    raise SystemExit(
        run(
            args.events,
            config_path=args.config,
            timezone=args.timezone,
            output=args.output,
            strict=args.strict,
        )
    )


if __name__ == "__main__":
    main()
