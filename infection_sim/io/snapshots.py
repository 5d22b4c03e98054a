"""Snapshot file persistence: an indented JSON array of flat agent records."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from infection_sim.domain.snapshot import PersonMemento, Snapshot


def save_snapshot(path: Path, mementos: Iterable[PersonMemento]) -> Path:
    """Write *mementos* to *path*, overwriting any existing file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    records = [memento.to_record() for memento in mementos]
    path.write_text(json.dumps(records, ensure_ascii=False, indent=2))
    return path


def load_snapshot(path: Path) -> Snapshot:
    """Read a snapshot file.

    I/O errors propagate unchanged. Malformed content raises
    :exc:`ValueError` naming the offending record index.
    """
    text = Path(path).read_text()
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Snapshot file is not valid JSON: {path}: {exc}") from exc
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValueError(f"Snapshot file must contain a JSON array: {path}")

    mementos: Snapshot = []
    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            raise ValueError(f"Snapshot record {index} must be a JSON object")
        try:
            mementos.append(PersonMemento.from_record(record))
        except ValueError as exc:
            raise ValueError(f"Snapshot record {index} is invalid: {exc}") from exc
    return mementos
