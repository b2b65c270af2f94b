"""
Document stores.

A document is a JSON object addressed by a slash-separated key such as
``system_data/roster``. Writes always replace the whole document.
"""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


def _split_key(key: str) -> List[str]:
    parts = key.split("/")
    if not key or any(part in ("", ".", "..") for part in parts):
        raise ValueError(f"Invalid document key: '{key}'")
    return parts


class DocumentStore:
    """Interface shared by the in-memory and JSON file stores."""

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def write(self, key: str, document: Dict[str, Any]) -> None:
        raise NotImplementedError

    def keys(self, prefix: str = "") -> List[str]:
        raise NotImplementedError


class InMemoryDocumentStore(DocumentStore):
    """Store used by tests and previews; documents are copied in and out."""

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        _split_key(key)
        document = self._documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    def write(self, key: str, document: Dict[str, Any]) -> None:
        _split_key(key)
        self._documents[key] = copy.deepcopy(document)

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._documents if k.startswith(prefix))


class JsonFileDocumentStore(DocumentStore):
    """
    One JSON file per document under ``root``.

    Writes go to a temporary file in the target directory which is then
    moved over the old file, so readers see either the previous document or
    the new one.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        parts = _split_key(key)
        return self.root.joinpath(*parts[:-1], parts[-1] + ".json")

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        path = self._path(key)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def write(self, key: str, document: Dict[str, Any]) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("Wrote document %s to %s", key, path)

    def keys(self, prefix: str = "") -> List[str]:
        if not self.root.exists():
            return []
        found = []
        for path in self.root.rglob("*.json"):
            key = path.relative_to(self.root).as_posix()[:-len(".json")]
            if key.startswith(prefix):
                found.append(key)
        return sorted(found)
