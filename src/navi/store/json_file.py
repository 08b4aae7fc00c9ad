"""JSON file store — one file per key under a data directory.

Writes go to a temp file first and are moved into place with
``os.replace``, so a crash mid-write leaves the previous value intact.
The previous value is also copied to ``.versions/`` before each write.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class JsonFileStore:
    """Directory-backed key-value store."""

    def __init__(self, root: Path, keep_versions: int = 5) -> None:
        self.root = root
        self.keep_versions = keep_versions
        self._ensure_initialized()

    def _ensure_initialized(self) -> None:
        """Ensure the data and backup directories exist. Idempotent."""
        (self.root / ".versions").mkdir(parents=True, exist_ok=True)

    # ── Paths ─────────────────────────────────────────────────

    def _slugify(self, key: str) -> str:
        """Strip characters that are illegal in file names."""
        slug = re.sub(r'[<>:"/\\|?*\n\r\t]', "", key).strip().replace(" ", "-")
        return slug or "unnamed"

    def path_for(self, key: str) -> Path:
        return self.root / f"{self._slugify(key)}.json"

    # ── Blocking IO (run off the event loop) ──────────────────

    def _read(self, key: str) -> Any | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def _write(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        self._backup(path)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(value, ensure_ascii=False, indent=1), encoding="utf-8")
        os.replace(tmp, path)

    def _backup(self, path: Path) -> None:
        """Backup to .versions/, keep at most ``keep_versions`` per key."""
        if self.keep_versions <= 0 or not path.exists():
            return
        versions_dir = self.root / ".versions"
        versions_dir.mkdir(exist_ok=True)
        ts = datetime.now().strftime("%Y%m%dT%H%M%S%f")
        (versions_dir / f"{path.stem}-{ts}.json").write_text(
            path.read_text(encoding="utf-8"), encoding="utf-8"
        )
        old = sorted(versions_dir.glob(f"{path.stem}-*.json"))
        for f in old[: -self.keep_versions]:
            f.unlink()

    # ── KeyValueStore ─────────────────────────────────────────

    async def get(self, key: str) -> Any | None:
        return await asyncio.to_thread(self._read, str(key))

    async def set(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._write, str(key), value)
        logger.debug("Wrote key %s", key)
