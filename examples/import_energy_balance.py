#!/usr/bin/env python3
"""Example: Load equipment capacities and step requirements into Postgres.

This script shows the two tabular import paths end to end:
1. An energy balance sheet creates or updates equipment capacities
2. A heat calculation sheet (optional) fills in utility requirements
   for the steps of an existing recipe

Connection details come from PLANTKIT_DB_URL (or the individual
PLANTKIT_DB_* variables).
"""

import logging
from pathlib import Path

from plantkit import EQUIPMENT_FIELDS, UTILITY_REQUIREMENT_FIELDS, default_reader
from plantkit.ingest import (
    PostgresStore,
    import_equipment_from_table,
    import_utility_requirements,
)


def print_mapping_report(report):
    """Show which sheet columns fed each field before importing."""
    print("Column mapping:")
    for field_name, labels in report["mapped"].items():
        if labels:
            print(f"  {field_name:24s} <- {', '.join(map(str, labels))}")
    if report["unresolved"]:
        print(f"  no column for: {', '.join(report['unresolved'])}")
    if report["unmapped"]:
        print(f"  ignored: {', '.join(map(str, report['unmapped']))}")
    print()


def load_plant_data(energy_balance_file: str, heat_calc_file: str = None, recipe_id: int = None):
    """Import an energy balance sheet and, optionally, a heat calculation sheet.

    Args:
        energy_balance_file: Path to the energy balance .xlsx or .csv
        heat_calc_file: Path to the heat calculation .xlsx or .csv
        recipe_id: Recipe whose steps receive the heat calculation loads
    """
    store = PostgresStore()
    reader = default_reader()

    try:
        energy_balance = Path(energy_balance_file).read_bytes()
        print_mapping_report(reader.get_mapping_report(energy_balance, EQUIPMENT_FIELDS))

        outcomes = import_equipment_from_table(energy_balance, store, reader=reader, debug=True)
        print(f"✓ Equipment: {len(outcomes)} rows reconciled")
        for outcome in outcomes:
            equipment = outcome.equipment
            print(
                f"  {outcome.status:8s} {equipment.tag or '-':10s} {equipment.name} "
                f"(steam {equipment.max_steam_load} TPH, power {equipment.max_power_load} kW)"
            )

        if heat_calc_file and recipe_id is not None:
            heat_calc = Path(heat_calc_file).read_bytes()
            print_mapping_report(reader.get_mapping_report(heat_calc, UTILITY_REQUIREMENT_FIELDS))

            steps = import_utility_requirements(heat_calc, recipe_id, store, reader=reader, debug=True)
            print(f"\n✓ Recipe {recipe_id}: {len(steps)} steps updated")
            for outcome in steps:
                note = f" (also matched {', '.join(outcome.ambiguous_with)})" if outcome.ambiguous_with else ""
                print(f"  {outcome.hint!r} → {outcome.step.name}{note}")

    finally:
        store.close()


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    if len(sys.argv) not in (2, 4):
        print("Usage: python import_energy_balance.py <energy_balance_file> [<heat_calc_file> <recipe_id>]")
        print("\nExample:")
        print("  python import_energy_balance.py energy_balance_power.xlsx energy_balance_heat.xlsx 3")
        sys.exit(1)

    if len(sys.argv) == 4:
        load_plant_data(sys.argv[1], sys.argv[2], int(sys.argv[3]))
    else:
        load_plant_data(sys.argv[1])
