#!/usr/bin/env python3
"""
Example usage of the Team Roster Management package.

Generates a rotation roster, reviews it, publishes it to a JSON store and
writes the calendar and spreadsheet exports next to it.
"""

from pathlib import Path

from roster_management import JsonFileDocumentStore, RosterManager, RosterRepository, ScheduleConflict
from roster_management.config import configure_logging, load_env, runtime_config
from roster_management.rostering import rows_to_dataframe, to_rows


CONFIG = {
    'staff': ["Brandon", "Ying Xian", "Derlinder", "Fadzlynn"],
    'tasks': ["EFT", "IPT+SKG", "NC", "FSG+WI"],
    'startDate': "2026-01-05",
    'weeks': 2
}


def main():
    load_env()
    settings = runtime_config()
    configure_logging(settings.log_level)

    print("=== Team Roster Demo ===\n")

    manager = RosterManager(RosterRepository(JsonFileDocumentStore(settings.data_dir)))

    # 1. Preview
    print("1. Generating preview...")
    preview = manager.preview(CONFIG)
    print(preview.get_summary_report())

    # 2. Show the first week as a table
    print("\n2. First week:")
    frame = rows_to_dataframe(to_rows(preview))
    print(frame.head(20).to_string(index=False))

    # 3. A config that cannot be covered
    print("\n3. Checking a config with more tasks than staff...")
    try:
        manager.preview({**CONFIG, 'staff': ["Brandon", "Ying Xian"]})
    except ScheduleConflict as exc:
        print(f"   Rejected: {exc}")

    # 4. Publish and export
    print("\n4. Publishing...")
    manager.publish(CONFIG)

    output_dir = Path(settings.data_dir) / "exports"
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / "roster.ics").write_bytes(manager.export_ics().encode("utf-8"))
    (output_dir / "roster.csv").write_text(manager.export_csv(), encoding="utf-8")
    print(f"   Exports written to {output_dir}")

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
