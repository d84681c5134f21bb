"""
Durable JSON documents and the in‑process state built on top of them.

Two documents are kept on disk: a flat media reference → URL map and
the category group index.  Both are read once at startup (a missing or
unreadable file means "start empty") and rewritten wholesale whenever
they change.  Writes go to a temporary file that is then renamed over
the target so a crash never leaves a half‑written document behind.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

GroupIndex = Dict[str, List[Dict[str, str]]]


class JsonDocumentStore:
    """Read and replace a single JSON object stored in a file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        """Return the stored object, or an empty dict when unavailable."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Cache file %s could not be read, starting empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Cache file %s does not hold a JSON object, starting empty", self.path)
            return {}
        return data

    def save(self, data: Dict[str, Any]) -> None:
        """Atomically replace the document with ``data``."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=self.path.name, suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


class MediaCache:
    """Append‑only mapping from media reference to resolved URL.

    An entry, once set to a non‑empty URL, is never replaced.  Every new
    entry is persisted before ``put`` returns.  There is no lock around
    read‑then‑write: resolution is idempotent, so two concurrent misses
    for the same reference only cost a redundant upstream lookup.
    """

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store
        self._entries: Dict[str, str] = {
            str(key): str(value) for key, value in store.load().items() if value
        }

    def get(self, reference: str) -> Optional[str]:
        return self._entries.get(reference)

    def put(self, reference: str, url: str) -> None:
        if not url or reference in self._entries:
            return
        self._entries[reference] = url
        self._store.save(dict(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, reference: object) -> bool:
        return reference in self._entries


class GroupIndexStore:
    """Holds the current category group index.

    Readers get the mapping that was current when they called
    ``snapshot``.  ``replace`` swaps in a fully built mapping and then
    persists it, so no reader ever observes a partially built index.  A
    failed write only costs durability: the new index keeps serving and
    the next successful rebuild rewrites the file.  Snapshots must be
    treated as read‑only.
    """

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store
        self._write_lock = threading.Lock()
        self._groups: GroupIndex = self._coerce(store.load())

    def snapshot(self) -> GroupIndex:
        return self._groups

    def replace(self, groups: GroupIndex) -> None:
        with self._write_lock:
            self._groups = groups
            try:
                self._store.save(groups)
            except OSError as e:
                logger.warning("Category groups could not be persisted to %s: %s", self._store.path, e)

    def __len__(self) -> int:
        return len(self._groups)

    @staticmethod
    def _coerce(raw: Dict[str, Any]) -> GroupIndex:
        """Keep only well‑formed ``{name, handle}`` members from a loaded file."""
        groups: GroupIndex = {}
        for key, members in raw.items():
            if not isinstance(members, list):
                continue
            groups[str(key)] = [
                {"name": str(m.get("name") or ""), "handle": str(m.get("handle") or "")}
                for m in members
                if isinstance(m, dict)
            ]
        return groups
