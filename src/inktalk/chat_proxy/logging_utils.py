from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict

logger = logging.getLogger(__name__)


class JsonlLogger:
    """Append-only JSON-lines request log with size based rotation.

    Writes are best-effort: serverless hosts often mount a read-only
    filesystem, and a failed audit line must never fail the request.
    """

    def __init__(self, path: str, max_bytes: int = 25_000_000):
        self.path = path
        self.max_bytes = max_bytes
        # Avoid mkdir("") when only a filename is provided.
        log_dir = os.path.dirname(path)
        if log_dir:
            try:
                os.makedirs(log_dir, exist_ok=True)
            except OSError as exc:
                logger.warning(f"[request-log] Cannot create {log_dir}: {exc}")

    def _rotate_if_needed(self):
        try:
            if (
                os.path.exists(self.path)
                and os.path.getsize(self.path) > self.max_bytes
            ):
                ts = time.strftime("%Y%m%d-%H%M%S")
                os.rename(self.path, f"{self.path}.{ts}")
        except OSError as exc:
            logger.warning(f"[request-log] Rotation failed for {self.path}: {exc}")

    def log(self, record: Dict[str, Any]):
        self._rotate_if_needed()
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record, ensure_ascii=False) + "\n")
        except OSError as exc:
            logger.warning(f"[request-log] Write failed for {self.path}: {exc}")
