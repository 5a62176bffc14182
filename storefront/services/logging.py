import json
import sys
from datetime import datetime, timezone


_LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}
_threshold = _LEVELS["info"]


def configure_logging(level: str) -> None:
    """Set the minimum level written by log_event."""
    global _threshold
    _threshold = _LEVELS.get((level or "info").lower(), _LEVELS["info"])


def log_event(level: str, event: str, **fields) -> None:
    lvl = level.lower()
    if _LEVELS.get(lvl, _LEVELS["info"]) < _threshold:
        return
    payload = {
        "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        "level": lvl,
        "event": event,
    }
    payload.update(fields or {})
    try:
        sys.stdout.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
    except (OSError, ValueError):
        # closed stdout during interpreter shutdown
        pass
