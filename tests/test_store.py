import json
import pytest
from datetime import date

from daymark.errors import DeserializeError, InvalidDayKey
from daymark.models import DayKey, Score
from daymark.store import ScoreStore


@pytest.fixture
def store():
    return ScoreStore()


@pytest.fixture
def populated():
    s = ScoreStore()
    s.toggle(DayKey(2024, 1, 15), Score.POSITIVE)
    s.toggle(DayKey(2024, 2, 20), Score.NEGATIVE)
    s.toggle(DayKey(2024, 3, 5), Score.POSITIVE)
    return s


# --- get ---

def test_get_unscored_day_is_neutral(store):
    assert store.get(DayKey(2024, 6, 12)) is Score.NEUTRAL


def test_get_accepts_dates_and_strings(populated):
    assert populated.get(date(2024, 1, 15)) is Score.POSITIVE
    assert populated.get("2024-02-20") is Score.NEGATIVE


def test_get_never_fails_on_bad_input(store):
    assert store.get("not a date") is Score.NEUTRAL


# --- toggle ---

@pytest.mark.parametrize("score", [Score.POSITIVE, Score.NEGATIVE])
def test_double_toggle_cancels(store, score):
    day = DayKey(2024, 6, 12)
    assert store.toggle(day, score) is score
    assert store.get(day) is score
    assert store.toggle(day, score) is Score.NEUTRAL
    assert store.get(day) is Score.NEUTRAL
    assert len(store) == 0


@pytest.mark.parametrize("score", [Score.POSITIVE, Score.NEGATIVE])
def test_double_toggle_restores_prior_state(populated, score):
    before = dict(populated.snapshot())
    day = DayKey(2024, 6, 12)
    populated.toggle(day, score)
    populated.toggle(day, score)
    assert dict(populated.snapshot()) == before


def test_toggle_switches_between_positive_and_negative(store):
    day = DayKey(2024, 6, 12)
    store.toggle(day, Score.POSITIVE)
    assert store.toggle(day, Score.NEGATIVE) is Score.NEGATIVE
    assert store.get(day) is Score.NEGATIVE


def test_toggle_neutral_always_clears(store):
    day = DayKey(2024, 6, 12)
    store.toggle(day, Score.NEUTRAL)
    assert day not in store

    store.toggle(day, Score.NEGATIVE)
    store.toggle(day, Score.NEUTRAL)
    assert day not in store
    assert len(store) == 0


def test_toggle_accepts_plain_ints(store):
    store.toggle("2024-06-12", 1)
    assert store.get(DayKey(2024, 6, 12)) is Score.POSITIVE


def test_toggle_rejects_invalid_day_and_leaves_store_unchanged(populated):
    before = dict(populated.snapshot())
    with pytest.raises(InvalidDayKey):
        populated.toggle("2024-04-31", Score.POSITIVE)
    with pytest.raises(InvalidDayKey):
        populated.toggle("2024-13-01", Score.POSITIVE)
    with pytest.raises(InvalidDayKey):
        populated.toggle(None, Score.POSITIVE)
    assert dict(populated.snapshot()) == before


def test_toggle_rejects_unknown_score(store):
    with pytest.raises(ValueError):
        store.toggle(DayKey(2024, 6, 12), 2)
    assert len(store) == 0


def test_store_never_holds_neutral(populated):
    assert Score.NEUTRAL not in populated.snapshot().values()


# --- snapshot ---

def test_snapshot_is_read_only(populated):
    snap = populated.snapshot()
    with pytest.raises(TypeError):
        snap[DayKey(2024, 6, 1)] = Score.POSITIVE


def test_snapshot_does_not_follow_later_toggles(populated):
    snap = populated.snapshot()
    populated.toggle(DayKey(2024, 6, 1), Score.POSITIVE)
    assert DayKey(2024, 6, 1) not in snap
    assert len(snap) == 3


def test_iteration_is_chronological():
    s = ScoreStore()
    s.toggle(DayKey(2024, 3, 5), Score.POSITIVE)
    s.toggle(DayKey(2023, 12, 31), Score.NEGATIVE)
    assert list(s) == [DayKey(2023, 12, 31), DayKey(2024, 3, 5)]


# --- serialize / load ---

def test_serialize_format(populated):
    payload = populated.serialize()
    assert isinstance(payload, bytes)
    assert json.loads(payload) == {"2024-01-15": 1, "2024-02-20": -1, "2024-03-05": 1}
    assert payload.startswith(b'{"2024-01-15":1')


def test_round_trip(populated):
    assert ScoreStore.from_payload(populated.serialize()) == populated


def test_round_trip_of_empty_store(store):
    assert store.serialize() == b"{}"
    assert ScoreStore.from_payload(store.serialize()) == store


def test_load_replaces_contents(populated):
    populated.load(b'{"2025-07-04": -1}')
    assert list(populated) == [DayKey(2025, 7, 4)]


def test_load_accepts_text_and_legacy_keys(store):
    store.load('{"2024-3-5": 1, "2024-12-25": -1}')
    assert store.get(DayKey(2024, 3, 5)) is Score.POSITIVE
    assert store.get(DayKey(2024, 12, 25)) is Score.NEGATIVE


def test_load_drops_explicit_zero_entries(store):
    store.load(b'{"2024-03-05": 0, "2024-03-06": 1}')
    assert list(store) == [DayKey(2024, 3, 6)]


@pytest.mark.parametrize("payload", [
    b"not json",
    b"\xff\xfe\x00",
    b"[1, -1]",
    b'"2024-03-05"',
    b'{"2024-02-30": 1}',
    b'{"March 5": 1}',
    b'{"2024-03-05": 2}',
    b'{"2024-03-05": -5}',
    b'{"2024-03-05": 1.0}',
    b'{"2024-03-05": "1"}',
    b'{"2024-03-05": true}',
    b'{"2024-03-05": null}',
    b'{"2024-3-5": 1, "2024-03-05": -1}',
])
def test_load_rejects_corrupt_payload_and_keeps_state(populated, payload):
    before = dict(populated.snapshot())
    with pytest.raises(DeserializeError):
        populated.load(payload)
    assert dict(populated.snapshot()) == before


def test_deeply_nested_payload_is_a_deserialize_error(populated):
    before = dict(populated.snapshot())
    with pytest.raises(DeserializeError):
        populated.load(b"[" * 100000)
    with pytest.raises(DeserializeError):
        populated.load(b'{"a":' * 100000)
    assert dict(populated.snapshot()) == before


@pytest.mark.parametrize("payload", [
    b'{"2024-03-05": 1, "2024-03-05": -1}',
    b'{"2024-3-5": 0, "2024-03-05": 1}',
    b'{"2024-03-05": -1, "2024-3-05": 0}',
])
def test_conflicting_entries_for_one_day_are_rejected(store, payload):
    with pytest.raises(DeserializeError):
        store.load(payload)
    assert len(store) == 0


def test_repeated_identical_entries_load(store):
    store.load(b'{"2024-03-05": 1, "2024-3-5": 1, "2024-03-06": 0, "2024-3-6": 0}')
    assert list(store) == [DayKey(2024, 3, 5)]


def test_nested_object_value_is_rejected(store):
    with pytest.raises(DeserializeError):
        store.load(b'{"2024-03-05": {"score": 1}}')


def test_partially_valid_payload_is_not_applied(store):
    with pytest.raises(DeserializeError):
        store.load(b'{"2024-03-05": 1, "2024-03-06": 7}')
    assert len(store) == 0


def test_stores_compare_by_contents(populated):
    other = ScoreStore({"2024-01-15": 1, "2024-02-20": -1, "2024-03-05": 1})
    assert other == populated
    other.toggle("2024-03-05", Score.POSITIVE)
    assert other != populated
