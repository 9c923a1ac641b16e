"""
Score store — the ledger of scored days.

Holds only days with an opinion: a day is in the store if and only if its
score is POSITIVE or NEGATIVE. Setting a day to NEUTRAL deletes it, so the
store's size tracks scored days rather than calendar span, and any day
that is missing simply counts as zero.

The store never touches disk. The caller decides when to persist
(see database.save_store); the dashboard persists after every toggle.

Persisted form: a JSON object, chronologically sorted:
    {"2024-01-15": 1, "2024-02-20": -1}
"""

import json
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union

from daymark.errors import DeserializeError, InvalidDayKey
from daymark.models import DayKey, Score, as_day_key


class ScoreStore:
    """In-memory map of DayKey -> Score (non-neutral entries only)."""

    def __init__(self, scores: Optional[Mapping] = None):
        self._scores: dict[DayKey, Score] = {}
        if scores:
            for key, value in scores.items():
                score = Score(value)
                if score is not Score.NEUTRAL:
                    self._scores[as_day_key(key)] = score

    @classmethod
    def from_payload(cls, payload: Union[bytes, str]) -> "ScoreStore":
        store = cls()
        store.load(payload)
        return store

    # ---- Reads ----

    def get(self, key) -> Score:
        """Score for a day, NEUTRAL when the day was never scored."""
        try:
            key = as_day_key(key)
        except InvalidDayKey:
            return Score.NEUTRAL
        return self._scores.get(key, Score.NEUTRAL)

    def snapshot(self) -> Mapping[DayKey, Score]:
        """Read-only copy of every scored day. Later toggles don't show up in it."""
        return MappingProxyType(dict(self._scores))

    def __len__(self) -> int:
        return len(self._scores)

    def __contains__(self, key) -> bool:
        return self.get(key) is not Score.NEUTRAL

    def __iter__(self) -> Iterator[DayKey]:
        return iter(sorted(self._scores))

    def __eq__(self, other) -> bool:
        if not isinstance(other, ScoreStore):
            return NotImplemented
        return self._scores == other._scores

    def __repr__(self) -> str:
        return f"ScoreStore({len(self._scores)} scored days)"

    # ---- The only mutator ----

    def toggle(self, key, candidate) -> Score:
        """
        Set a day's score, or clear it if it already has that score.

        toggle(day, POSITIVE) on a POSITIVE day clears it; on any other day it
        makes the day POSITIVE. A NEUTRAL candidate always clears.

        Raises InvalidDayKey (store unchanged) when `key` isn't a real
        calendar day. Returns the day's score after the toggle.
        """
        key = as_day_key(key)
        candidate = Score(candidate)

        if candidate is Score.NEUTRAL or self._scores.get(key) is candidate:
            self._scores.pop(key, None)
            return Score.NEUTRAL

        self._scores[key] = candidate
        return candidate

    # ---- Persistence format ----

    def serialize(self) -> bytes:
        """Canonical persisted form: sorted keys, compact JSON, UTF-8."""
        ordered = {str(key): int(self._scores[key]) for key in sorted(self._scores)}
        return json.dumps(ordered, separators=(",", ":")).encode("utf-8")

    def load(self, payload: Union[bytes, str]) -> None:
        """
        Replace the store's contents with a persisted payload.

        The whole payload is validated before anything is applied. On any
        problem DeserializeError is raised and the store keeps its previous
        contents.
        """
        self._scores = _parse_payload(payload)


class _ObjectPairs(list):
    """A decoded JSON object kept as its (key, value) pairs, duplicates and all."""


def _parse_payload(payload: Union[bytes, str]) -> dict[DayKey, Score]:
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeserializeError(f"payload is not valid UTF-8: {e}") from e
    if not isinstance(payload, str):
        raise DeserializeError(f"payload must be bytes or str, got {type(payload).__name__}")

    try:
        raw = json.loads(payload, object_pairs_hook=_ObjectPairs)
    except json.JSONDecodeError as e:
        raise DeserializeError(f"payload is not valid JSON: {e}") from e
    except RecursionError as e:
        raise DeserializeError("payload is nested too deeply") from e

    if not isinstance(raw, _ObjectPairs):
        raise DeserializeError(f"payload must be a JSON object, got {type(raw).__name__}")

    # every pair, neutral ones included, so repeated keys can't hide a conflict
    seen: dict[DayKey, Score] = {}
    parsed: dict[DayKey, Score] = {}
    for text_key, value in raw:
        try:
            key = DayKey.parse(text_key)
        except InvalidDayKey as e:
            raise DeserializeError(f"bad day key {text_key!r}: {e}") from e

        # bool is an int subclass in Python; true/false are not scores
        if not isinstance(value, int) or isinstance(value, bool):
            raise DeserializeError(f"score for {text_key} must be an integer, got {value!r}")
        if value not in (-1, 0, 1):
            raise DeserializeError(f"score for {text_key} out of range: {value}")

        score = Score(value)
        previous = seen.setdefault(key, score)
        if previous is not score:
            raise DeserializeError(f"conflicting scores for {key}")
        if score is not Score.NEUTRAL:
            parsed[key] = score

    return parsed
