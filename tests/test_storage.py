from __future__ import annotations

import datetime

import pytest

from roster_management.exceptions import RosterNotFound, ScheduleConflict
from roster_management.rostering import RosterManager, RosterTable, generate
from roster_management.storage import (
    CheckInRepository,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    RosterRepository,
)
from roster_management.wellbeing import CheckIn, Phase


def test_in_memory_store_copies_documents() -> None:
    store = InMemoryDocumentStore()
    document = {"logs": [1, 2]}
    store.write("wellbeing_history/nisa", document)

    document["logs"].append(3)
    read_back = store.read("wellbeing_history/nisa")
    read_back["logs"].append(4)

    assert store.read("wellbeing_history/nisa") == {"logs": [1, 2]}
    assert store.read("wellbeing_history/alif") is None


def test_json_store_replaces_whole_document(tmp_path) -> None:
    store = JsonFileDocumentStore(tmp_path)
    store.write("system_data/roster", {"2026-01-05": [{"task": "EFT", "staff": "Brandon"}]})
    store.write("system_data/roster", {"2026-01-06": []})

    assert store.read("system_data/roster") == {"2026-01-06": []}
    assert (tmp_path / "system_data" / "roster.json").exists()
    assert list((tmp_path / "system_data").glob("*.tmp")) == []


def test_json_store_lists_keys(tmp_path) -> None:
    store = JsonFileDocumentStore(tmp_path)
    store.write("wellbeing_history/nisa", {"logs": []})
    store.write("wellbeing_history/alif", {"logs": []})
    store.write("system_data/roster", {})

    assert store.keys("wellbeing_history/") == ["wellbeing_history/alif", "wellbeing_history/nisa"]
    assert JsonFileDocumentStore(tmp_path / "missing").keys() == []


@pytest.mark.parametrize("staff_id", ["jane.doe", "o.brien-2", "v1.2.json", "nisa"])
def test_json_store_keeps_dotted_keys(tmp_path, staff_id) -> None:
    store = JsonFileDocumentStore(tmp_path)
    key = f"wellbeing_history/{staff_id}"
    store.write(key, {"logs": [staff_id]})

    assert store.read(key) == {"logs": [staff_id]}
    assert store.keys("wellbeing_history/") == [key]


def test_checkin_histories_with_dotted_ids_stay_separate(tmp_path) -> None:
    repository = CheckInRepository(JsonFileDocumentStore(tmp_path))
    stamp = datetime.datetime(2026, 1, 5, 9, 0, tzinfo=datetime.timezone.utc)
    repository.append(CheckIn("jane.doe", stamp, Phase.HEALTHY, 90))
    repository.append(CheckIn("jane.smith", stamp, Phase.ILL, 10))

    assert [c.energy for c in repository.history("jane.doe")] == [90]
    assert [c.energy for c in repository.history("jane.smith")] == [10]
    assert sorted(repository.all_histories()) == ["jane.doe", "jane.smith"]


@pytest.mark.parametrize("key", ["", "../escape", "system_data//roster", "a/./b"])
def test_store_rejects_bad_keys(tmp_path, key) -> None:
    with pytest.raises(ValueError):
        JsonFileDocumentStore(tmp_path).write(key, {})


def test_repository_round_trip(store, example_config) -> None:
    repository = RosterRepository(store)
    table = generate(example_config)

    assert repository.read_roster_table() is None
    repository.write_roster_table(table)

    assert repository.read_roster_table() == table


def test_snapshot_without_ids_derives_them() -> None:
    table = RosterTable.from_dict({"2026-01-05": [{"task": "IPT+SKG", "staff": "Ying Xian"}]})

    [assignment] = list(table)
    assert assignment.staff_id == "ying-xian"
    assert assignment.task_id == "ipt-skg"


def test_failed_publish_leaves_previous_roster(store, example_config) -> None:
    manager = RosterManager(RosterRepository(store))
    published = manager.publish(example_config)

    with pytest.raises(ScheduleConflict):
        manager.publish({**example_config, "staff": ["Brandon"]})

    assert manager.current() == published


def test_preview_does_not_store(store, example_config) -> None:
    manager = RosterManager(RosterRepository(store))
    manager.preview(example_config)

    assert manager.current() is None
    with pytest.raises(RosterNotFound):
        manager.export_csv()


def test_publish_replaces_previous_roster(store, example_config) -> None:
    manager = RosterManager(RosterRepository(store))
    manager.publish(example_config)
    second = manager.publish({**example_config, "startDate": "2026-02-02"})

    assert manager.current() == second
    assert manager.current().dates()[0] == "2026-02-02"


def test_manager_exports_published_roster(tmp_path, example_config) -> None:
    manager = RosterManager(RosterRepository(JsonFileDocumentStore(tmp_path)))
    manager.publish(example_config)

    assert manager.export_csv().count("\n") == 21
    assert manager.export_ics().count("BEGIN:VEVENT") == 20
