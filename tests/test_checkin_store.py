import sqlite3
import threading

import pandas as pd
import pytest

from pinewood.core.models import NewScout, Scout
from pinewood.storage.sqlite_store import (
    CheckinError,
    NotFound,
    StorageError,
    UniquenessViolation,
    initialize,
)


def test_register_returns_stored_scout(store):
    scout = store.register("Ada Lovelace", "Wolf", 1, 4.85)

    assert isinstance(scout, Scout)
    assert scout.id >= 1
    assert scout.name == "Ada Lovelace"
    assert scout.den == "Wolf"
    assert scout.car_number == 1
    assert scout.car_weight == pytest.approx(4.85)
    assert scout.checked_in is True
    assert scout.created_at
    assert store.get(scout.id) == scout


def test_register_persists_before_returning(store):
    scout = store.register("Grace", "Bear", 3, 5.0)

    with sqlite3.connect(store.path) as conn:
        row = conn.execute(
            "SELECT name, car_number, checked_in FROM scouts WHERE id = ?", (scout.id,)
        ).fetchone()
    assert row == ("Grace", 3, 1)


def test_register_does_not_validate_fields(store):
    scout = store.register("", "", 10, -1.5)
    assert scout.name == ""
    assert scout.car_weight == -1.5


def test_register_new_payload(store):
    scout = store.register_new(NewScout(name="Linus", den="Tiger", car_number=8, car_weight=4.2))
    assert (scout.name, scout.den, scout.car_number) == ("Linus", "Tiger", 8)


def test_duplicate_car_number_is_rejected(store):
    store.register("Ada", "Wolf", 7, 4.9)

    with pytest.raises(UniquenessViolation) as excinfo:
        store.register("Grace", "Bear", 7, 4.5)

    assert excinfo.value.car_number == 7
    assert not isinstance(excinfo.value, StorageError)
    assert isinstance(excinfo.value, CheckinError)
    assert store.count() == 1
    assert [s.name for s in store.list_checked_in()] == ["Ada"]


def test_ids_increase_and_are_not_reused_after_rejection(store):
    first = store.register("Ada", "Wolf", 1, 4.9)
    with pytest.raises(UniquenessViolation):
        store.register("Dup", "Wolf", 1, 4.9)
    second = store.register("Grace", "Bear", 2, 4.5)
    assert second.id > first.id


def test_get_unknown_id_raises_not_found(store):
    with pytest.raises(NotFound) as excinfo:
        store.get(999)
    assert excinfo.value.scout_id == 999


def test_list_checked_in_empty(store):
    assert store.list_checked_in() == []


def test_list_checked_in_newest_first(store):
    a = store.register("A", "Wolf", 1, 4.0)
    b = store.register("B", "Bear", 2, 4.1)

    assert store.list_checked_in() == [b, a]


def test_list_checked_in_orders_by_created_at(store):
    with sqlite3.connect(store.path) as conn:
        conn.execute(
            "INSERT INTO scouts (name, den, car_number, car_weight, created_at) "
            "VALUES ('Early', 'Wolf', 1, 4.0, '2025-01-18 09:00:00')"
        )
        conn.execute(
            "INSERT INTO scouts (name, den, car_number, car_weight, created_at) "
            "VALUES ('Earliest', 'Wolf', 2, 4.0, '2025-01-18 08:00:00')"
        )
        conn.execute(
            "INSERT INTO scouts (name, den, car_number, car_weight, created_at, checked_in) "
            "VALUES ('Gone', 'Bear', 3, 4.0, '2025-01-18 10:00:00', 0)"
        )

    assert [s.name for s in store.list_checked_in()] == ["Early", "Earliest"]


def test_next_car_number_starts_at_one(store):
    assert store.next_car_number() == 1


def test_next_car_number_follows_highest(store):
    for number in (5, 1, 2):
        store.register(f"Scout {number}", "Webelos", number, 4.5)

    assert store.next_car_number() == 6


def test_next_car_number_counts_scouts_not_checked_in(store):
    with sqlite3.connect(store.path) as conn:
        conn.execute(
            "INSERT INTO scouts (name, den, car_number, car_weight, checked_in) "
            "VALUES ('Gone', 'Bear', 12, 4.0, 0)"
        )
    assert store.next_car_number() == 13


def test_next_car_number_does_not_reserve(store):
    suggested = store.next_car_number()
    assert store.next_car_number() == suggested
    store.register("A", "Wolf", suggested, 4.0)
    with pytest.raises(UniquenessViolation):
        store.register("B", "Wolf", suggested, 4.0)


def test_concurrent_duplicate_registration_has_one_winner(tmp_path):
    store = initialize(tmp_path / "race.db")
    barrier = threading.Barrier(8)
    results: list[object] = []
    lock = threading.Lock()

    def worker(i: int) -> None:
        barrier.wait()
        try:
            outcome: object = store.register(f"Scout {i}", "Wolf", 42, 4.5)
        except CheckinError as exc:
            outcome = exc
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    try:
        winners = [r for r in results if isinstance(r, Scout)]
        losers = [r for r in results if isinstance(r, UniquenessViolation)]
        assert len(winners) == 1
        assert len(losers) == 7
        assert store.count() == 1
        assert store.pool.size <= 5
    finally:
        store.close()


def test_concurrent_checkins_get_distinct_numbers(tmp_path):
    store = initialize(tmp_path / "race.db")
    assigned: list[int] = []
    lock = threading.Lock()

    def worker(i: int) -> None:
        while True:
            try:
                scout = store.register(f"Scout {i}", "Bear", store.next_car_number(), 4.0)
            except UniquenessViolation:
                continue
            with lock:
                assigned.append(scout.car_number)
            return

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    try:
        assert sorted(assigned) == list(range(1, 11))
        assert store.next_car_number() == 11
    finally:
        store.close()


def test_race_config_defaults(store):
    config = store.race_config()
    assert config.num_lanes == 4
    assert config.timer_port is None
    assert config.heats_per_scout == 3
    assert config.scoring_method == "points"


def test_roster_dataframe(store):
    store.register("A", "Wolf", 1, 4.0)
    store.register("B", "Bear", 2, 4.5)

    df = store.roster_dataframe()

    assert list(df.columns) == [
        "id",
        "name",
        "den",
        "car_number",
        "car_weight",
        "checked_in",
        "created_at",
    ]
    assert list(df["name"]) == ["B", "A"]
    assert df["checked_in"].dtype == bool


def test_roster_dataframe_empty(store):
    df = store.roster_dataframe()
    assert isinstance(df, pd.DataFrame)
    assert df.empty
    assert "car_number" in df.columns


def test_operations_after_close_raise_storage_error(tmp_path):
    store = initialize(tmp_path / "race.db")
    store.close()

    with pytest.raises(StorageError):
        store.list_checked_in()
    with pytest.raises(StorageError):
        store.register("A", "Wolf", 1, 4.0)


def test_car_number_beyond_sqlite_integer_is_a_storage_error(store):
    with pytest.raises(StorageError) as excinfo:
        store.register("Big", "Wolf", 2**63, 4.0)
    assert isinstance(excinfo.value.__cause__, OverflowError)
    assert store.count() == 0


def test_next_car_number_past_integer_limit_fails_typed(store):
    store.register("Max", "Wolf", 2**63 - 1, 4.0)
    suggested = store.next_car_number()
    assert suggested == 2**63

    with pytest.raises(StorageError):
        store.register("Over", "Wolf", suggested, 4.0)
    assert store.count() == 1
