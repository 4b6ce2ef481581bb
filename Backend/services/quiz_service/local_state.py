# services/quiz_service/local_state.py
"""
Player-side state: answers, correctness and overturns per quiz date.

State lives in a flat string -> string store (one JSON file on disk for the
terminal player). Slot keys are `<date key>-answers`, `<date key>-correct`
and `<date key>-overturns`. New values are written as a versioned envelope
`{"version": 1, "data": [...]}`; bare JSON arrays from older writers are
still read and get upgraded the first time they are resolved.
"""

from __future__ import annotations
import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from .date_keys import legacy_key_candidates, parse_canonical_key, storage_key

logger = logging.getLogger(__name__)

RECORD_VERSION = 1

ANSWERS = "answers"
CORRECT = "correct"
OVERTURNS = "overturns"


class StorageError(RuntimeError):
    """Raised when the local store cannot be written."""


# ============================================================================
# Stores
# ============================================================================

class KeyValueStore:
    """String-keyed, string-valued store."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def set_many(self, items: Dict[str, str]) -> None:
        """
        Write several keys as one unit: if any write fails, the keys already
        written are put back to their previous values and the error re-raised.
        """
        previous = {key: self.get(key) for key in items}
        written: List[str] = []
        try:
            for key, value in items.items():
                self.set(key, value)
                written.append(key)
        except StorageError:
            for key in reversed(written):
                if previous[key] is None:
                    self.delete(key)
                else:
                    self.set(key, previous[key])
            raise


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Whole store kept in one JSON object; every write rewrites the file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring state file %s: not a JSON object", self.path)
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _write(self, updated: Dict[str, str]) -> None:
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(updated, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp is not None and os.path.exists(tmp):
                os.unlink(tmp)
            raise StorageError(f"Could not write {self.path}: {e}") from e
        self._data = updated

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def delete(self, key: str) -> None:
        if key in self._data:
            updated = dict(self._data)
            del updated[key]
            self._write(updated)

    def set_many(self, items: Dict[str, str]) -> None:
        # one file replace, so either every key lands or none does
        updated = dict(self._data)
        updated.update(items)
        self._write(updated)


# ============================================================================
# Versioned slot values
# ============================================================================

def slot(key: str, kind: str) -> str:
    return f"{key}-{kind}"


def encode_slot(values: List[Any]) -> str:
    return json.dumps({"version": RECORD_VERSION, "data": list(values)}, ensure_ascii=False)


def decode_slot(raw: Optional[str]) -> Optional[List[Any]]:
    """Parse a slot value; bare arrays are the pre-versioned format."""
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed stored value: %r", raw[:80])
        return None
    if isinstance(value, list):
        return value
    if isinstance(value, dict) and isinstance(value.get("data"), list):
        if value.get("version") != RECORD_VERSION:
            logger.warning("Unknown stored record version %r", value.get("version"))
            return None
        return value["data"]
    return None


def is_versioned(raw: Optional[str]) -> bool:
    try:
        value = json.loads(raw) if raw else None
    except ValueError:
        return False
    return isinstance(value, dict) and "version" in value


# ============================================================================
# Day state + migration
# ============================================================================

@dataclass
class DayState:
    key: str
    answers: Optional[List[str]] = None
    correct: Optional[List[bool]] = None
    overturns: List[bool] = field(default_factory=list)
    migrated_from: Optional[str] = None

    @property
    def submitted(self) -> bool:
        return self.answers is not None


def _upgrade(store: KeyValueStore, key: str, kind: str) -> None:
    """Rewrite a bare-array canonical slot as a versioned value (once)."""
    raw = store.get(slot(key, kind))
    if raw and not is_versioned(raw):
        values = decode_slot(raw)
        if values is not None:
            store.set(slot(key, kind), encode_slot(values))


def _migrate_legacy(store: KeyValueStore, key: str, day: date) -> Optional[str]:
    for legacy in legacy_key_candidates(day):
        if legacy == key:
            continue
        raw_answers = store.get(slot(legacy, ANSWERS))
        if not raw_answers:
            continue
        answers = decode_slot(raw_answers)
        if answers is None:
            continue
        items = {slot(key, ANSWERS): encode_slot(answers)}
        correct = decode_slot(store.get(slot(legacy, CORRECT)))
        if correct is not None:
            items[slot(key, CORRECT)] = encode_slot(correct)
        store.set_many(items)
        logger.info("Migrated saved answers from %r to %r", legacy, key)
        return legacy
    return None


def resolve_day_state(
    store: KeyValueStore, quiz_date: Optional[str] = None, today: Optional[date] = None
) -> DayState:
    """
    Load saved state for a quiz date. The canonical slots win; otherwise the
    first legacy key holding answers is copied to the canonical slots. Once
    the canonical slots exist, legacy keys are never looked at again.
    """
    key = storage_key(quiz_date, today)
    state = DayState(key=key)

    if store.get(slot(key, ANSWERS)):
        _upgrade(store, key, ANSWERS)
        _upgrade(store, key, CORRECT)
    else:
        day = parse_canonical_key(key)
        state.migrated_from = _migrate_legacy(store, key, day)

    state.answers = decode_slot(store.get(slot(key, ANSWERS)))
    state.correct = decode_slot(store.get(slot(key, CORRECT)))
    state.overturns = decode_slot(store.get(slot(key, OVERTURNS))) or []
    return state


def find_correct_count(store: KeyValueStore, day: date) -> Optional[int]:
    """Number of correct answers saved for `day` under any key format, read-only."""
    for key in legacy_key_candidates(day):
        values = decode_slot(store.get(slot(key, CORRECT)))
        if values is not None:
            return sum(1 for v in values if v)
    return None


def save_slots(store: KeyValueStore, key: str, slots: Dict[str, List[Any]]) -> None:
    """Write several slots of one day together; nothing is kept if one fails."""
    store.set_many({slot(key, kind): encode_slot(values) for kind, values in slots.items()})
