"""Equipment and recipe step reconciliation against the entity store."""

from .store import (
    EntityStore,
    EquipmentRecord,
    RecipeRecord,
    RecipeStepRecord,
    RecipeNotFoundError,
)
from .equipment import (
    EquipmentCandidate,
    EquipmentOutcome,
    candidate_from_row,
    resolve_identity,
    reconcile_equipment,
)
from .steps import StepMatch, StepOutcome, match_step, match_and_update
from .importers import (
    DocumentImportResult,
    import_from_document,
    import_equipment_from_table,
    import_utility_requirements,
)
from .postgres_store import PostgresStore

__all__ = [
    "EntityStore",
    "EquipmentRecord",
    "RecipeRecord",
    "RecipeStepRecord",
    "RecipeNotFoundError",
    "EquipmentCandidate",
    "EquipmentOutcome",
    "candidate_from_row",
    "resolve_identity",
    "reconcile_equipment",
    "StepMatch",
    "StepOutcome",
    "match_step",
    "match_and_update",
    "DocumentImportResult",
    "import_from_document",
    "import_equipment_from_table",
    "import_utility_requirements",
    "PostgresStore",
]
