"""State document persistence adapters."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError as SchemaError

from .catalog import DEFAULT_CONTROLS
from .errors import PersistenceError
from .models import Control, Document
from .templates import DEFAULT_TEMPLATE, get_template


class StateAdapter(Protocol):
    """Storage for the full session document.

    Implementations report storage and decoding failures as ``PersistenceError``.
    """

    def load(self) -> Document | None:
        """Return the stored document, or None if nothing was stored.

        Raises ``PersistenceError`` when stored state cannot be read or decoded.
        """

    def save(self, document: Document) -> None:
        """Replace the stored document; raises ``PersistenceError`` on failure."""


def default_document(template_key: str = DEFAULT_TEMPLATE) -> Document:
    """Fresh state: template defaults, default control loops, nothing scored yet."""

    template = get_template(template_key)
    return Document(
        template_key=template.key,
        hazards=template.fresh_hazards(),
        constraints=template.fresh_constraints(),
        segments=template.fresh_segments(),
        controls=[
            Control(id=cid, name=name, readiness=readiness, uca_count=uca_count)
            for cid, name, readiness, uca_count in DEFAULT_CONTROLS
        ],
    )


def decode_document(raw: str) -> Document:
    try:
        return Document.model_validate_json(raw)
    except SchemaError as exc:
        raise PersistenceError(f"Stored state is invalid: {exc}") from exc


class MemoryAdapter:
    """Keep the serialized document in memory."""

    def __init__(self, raw: str | None = None) -> None:
        self.raw = raw
        self.saves = 0

    def load(self) -> Document | None:
        if self.raw is None:
            return None
        return decode_document(self.raw)

    def save(self, document: Document) -> None:
        self.raw = document.model_dump_json()
        self.saves += 1


class JsonFileAdapter:
    """Store the document as ``<directory>/<storage_key>.json``.

    Writes go through a temporary file and an atomic replace.
    """

    def __init__(self, directory: str | Path, storage_key: str) -> None:
        self._directory = Path(directory)
        self._storage_key = storage_key

    @property
    def path(self) -> Path:
        return self._directory / f"{self._storage_key}.json"

    def load(self) -> Document | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        return decode_document(raw)

    def save(self, document: Document) -> None:
        payload = document.model_dump_json(indent=2)
        tmp_name: str | None = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{self._storage_key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc
