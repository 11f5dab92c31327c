"""Shared fixtures: an in-memory entity store and spreadsheet byte builders."""

import io
from dataclasses import replace
from typing import Any, Dict, List, Optional

import openpyxl
import pytest

from plantkit.ingest.store import (
    EntityStore,
    EquipmentRecord,
    RecipeRecord,
    RecipeStepRecord,
)

MUTATIONS = {"create_equipment", "update_equipment", "update_recipe_step"}


class InMemoryStore(EntityStore):
    """EntityStore fake that records every call. Returns copies, like a real store."""

    def __init__(self):
        self.equipment: Dict[int, EquipmentRecord] = {}
        self.recipes: Dict[int, RecipeRecord] = {}
        self.calls: List[tuple] = []
        self._next_id = 1

    def _new_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    # -- seeding -------------------------------------------------------------

    def add_equipment(self, name: str, tag: Optional[str] = None, **loads) -> EquipmentRecord:
        record = EquipmentRecord(id=self._new_id(), name=name, tag=tag, **loads)
        self.equipment[record.id] = record
        return replace(record)

    def add_recipe(self, recipe_id: int, name: str, step_names: List[str], **requirements) -> RecipeRecord:
        steps = [
            RecipeStepRecord(
                id=self._new_id(),
                recipe_id=recipe_id,
                name=step_name,
                step_number=(index + 1) * 10,
                **requirements
            )
            for index, step_name in enumerate(step_names)
        ]
        self.recipes[recipe_id] = RecipeRecord(id=recipe_id, name=name, steps=steps)
        return self._copy_recipe(self.recipes[recipe_id])

    @staticmethod
    def _copy_recipe(recipe: RecipeRecord) -> RecipeRecord:
        return RecipeRecord(
            id=recipe.id,
            name=recipe.name,
            steps=[replace(step) for step in recipe.steps]
        )

    @property
    def mutations(self) -> List[tuple]:
        return [call for call in self.calls if call[0] in MUTATIONS]

    def step(self, step_id: int) -> RecipeStepRecord:
        for recipe in self.recipes.values():
            for step in recipe.steps:
                if step.id == step_id:
                    return step
        raise KeyError(step_id)

    # -- EntityStore ---------------------------------------------------------

    def find_equipment(self, tag=None, name=None):
        self.calls.append(("find_equipment", tag, name))
        for record in self.equipment.values():
            if (tag and record.tag == tag) or (name and record.name == name):
                return replace(record)
        return None

    def create_equipment(self, fields):
        self.calls.append(("create_equipment", dict(fields)))
        record = EquipmentRecord(id=self._new_id(), **fields)
        self.equipment[record.id] = record
        return replace(record)

    def update_equipment(self, equipment_id, fields):
        self.calls.append(("update_equipment", equipment_id, dict(fields)))
        record = self.equipment[equipment_id]
        for key, value in fields.items():
            setattr(record, key, value)
        return replace(record)

    def get_recipe_with_steps(self, recipe_id):
        self.calls.append(("get_recipe_with_steps", recipe_id))
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            return None
        return self._copy_recipe(recipe)

    def update_recipe_step(self, step_id, fields):
        self.calls.append(("update_recipe_step", step_id, dict(fields)))
        step = self.step(step_id)
        for key, value in fields.items():
            setattr(step, key, value)
        return replace(step)


@pytest.fixture
def store():
    return InMemoryStore()


def _xlsx_bytes(sheets: List[List[List[Any]]]) -> bytes:
    wb = openpyxl.Workbook()
    for index, rows in enumerate(sheets):
        ws = wb.active if index == 0 else wb.create_sheet(f"Sheet{index + 1}")
        for row in rows:
            ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_xlsx():
    """Build .xlsx bytes: make_xlsx(header_and_rows, *more_sheets)."""
    def _make(rows, *other_sheets):
        return _xlsx_bytes([rows, *other_sheets])
    return _make


@pytest.fixture
def make_csv():
    """Build CSV bytes from text (utf-8 by default)."""
    def _make(text: str, encoding: str = "utf-8"):
        return text.encode(encoding)
    return _make
