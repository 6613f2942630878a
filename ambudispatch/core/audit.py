import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def _log_file() -> Path:
    log_dir = Path(os.getenv("AUDIT_LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "audit.log"


def log_event(event_type: str, payload: Dict[str, Any], request_id: Optional[str] = None) -> None:
    record = {
        "ts": datetime.utcnow().isoformat(timespec="seconds") + "Z",
        "event": event_type,
        "request_id": request_id,
        **payload,
    }
    try:
        with _log_file().open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
    except OSError as e:
        # audit log tidak boleh menggagalkan request
        logger.warning("gagal menulis audit log: %s", e)
