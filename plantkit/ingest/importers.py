"""
Ingestion entry points.

Three flows share the same shape: read the first sheet of an upload, turn
each row (or extracted entry) into a candidate, and reconcile candidates
one at a time in source order. Each call is a fold over its rows with an
explicit outcome list as accumulator. A row may depend on what an earlier
row of the same call wrote (two rows naming the same new equipment must
create it once), so nothing is batched or parallelised.

Rows with no usable data are skipped silently. Store and extraction errors
propagate to the caller unchanged; rows already written stay written.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Callable, TypeVar

from ..extraction import StructureExtractor
from ..field_resolver import FieldResolver
from ..parser import SheetReader, default_reader
from ..schema import UTILITY_REQUIREMENT_FIELDS, STEP_REQUIREMENT_FIELDS
from .equipment import (
    EquipmentCandidate,
    EquipmentOutcome,
    candidate_from_row,
    reconcile_equipment,
    CREATED,
)
from .steps import StepOutcome, match_and_update
from .store import EntityStore, RecipeNotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DocumentImportResult:
    """
    Outcome of a PFD import.

    raw is the extraction payload exactly as the service returned it, so
    callers can compare it with what reconciliation did.
    """
    raw: Dict[str, Any]
    created: Dict[str, List[EquipmentOutcome]] = field(
        default_factory=lambda: {"equipment": []}
    )


def _fold(
    items: List[Any],
    reconcile_item: Callable[[int, Any], Optional[T]]
) -> List[T]:
    """Apply reconcile_item to each item in order, collecting non-None outcomes."""
    outcomes: List[T] = []
    for index, item in enumerate(items):
        outcome = reconcile_item(index, item)
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes


def _entry_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def import_from_document(
    data: bytes,
    extractor: StructureExtractor,
    store: EntityStore,
    reader: Optional[SheetReader] = None,
    debug: bool = False
) -> DocumentImportResult:
    """
    Import equipment from a process flow diagram workbook.

    The first sheet is rendered as comma-separated text and sent to the
    extraction service. Each {name, tag?} entry of the returned "equipment"
    list is reconciled by tag or name; no capacities are set on this path.

    Args:
        data: Uploaded workbook content
        extractor: Document extraction service
        store: Entity store
        reader: Row source (default: default_reader())
        debug: Log each reconciliation decision

    Returns:
        DocumentImportResult with the raw extraction and the equipment outcomes

    Raises:
        ValueError: If the upload cannot be read
        ExtractionError: If the extraction reply is malformed
    """
    reader = reader or default_reader()

    try:
        text = reader.render_text(data)
        raw = extractor.extract_structure(text)

        def reconcile_entry(index: int, entry: Any) -> Optional[EquipmentOutcome]:
            if not isinstance(entry, dict):
                logger.warning(f"Skipping extracted equipment entry {index}: not an object ({entry!r})")
                return None
            candidate = EquipmentCandidate(
                tag=_entry_text(entry.get("tag")),
                name=_entry_text(entry.get("name")),
            )
            return reconcile_equipment(candidate, store, debug=debug)

        outcomes = _fold(raw.get("equipment") or [], reconcile_entry)

        if debug:
            _log_equipment_summary("PFD import", outcomes)

        return DocumentImportResult(raw=raw, created={"equipment": outcomes})

    except Exception as e:
        logger.error(f"PFD import failed: {e}", exc_info=True)
        raise


def import_equipment_from_table(
    data: bytes,
    store: EntityStore,
    reader: Optional[SheetReader] = None,
    resolver: Optional[FieldResolver] = None,
    debug: bool = False
) -> List[EquipmentOutcome]:
    """
    Import equipment capacities from an energy balance sheet.

    Each row resolves to a tag, a name and up to four capacities. Rows with
    neither tag nor name are skipped.

    Args:
        data: Uploaded sheet content
        store: Entity store
        reader: Row source (default: default_reader())
        resolver: Field resolver (default: FieldResolver())
        debug: Log each reconciliation decision

    Returns:
        One EquipmentOutcome per row that created or updated a record

    Raises:
        ValueError: If the upload cannot be read
    """
    reader = reader or default_reader()
    resolver = resolver or FieldResolver()

    try:
        rows = reader.read_rows(data)

        def reconcile_row(index: int, row: Dict[str, Any]) -> Optional[EquipmentOutcome]:
            candidate = candidate_from_row(row, resolver)
            if not candidate.tag and not candidate.name:
                logger.debug(f"Skipping energy balance row {index}: no tag or name")
                return None
            return reconcile_equipment(candidate, store, debug=debug)

        outcomes = _fold(rows, reconcile_row)

        if debug:
            _log_equipment_summary(f"Energy balance import ({len(rows)} rows)", outcomes)

        return outcomes

    except Exception as e:
        logger.error(f"Energy balance import failed: {e}", exc_info=True)
        raise


def import_utility_requirements(
    data: bytes,
    recipe_id: int,
    store: EntityStore,
    reader: Optional[SheetReader] = None,
    resolver: Optional[FieldResolver] = None,
    debug: bool = False
) -> List[StepOutcome]:
    """
    Import per-step utility requirements from a heat calculation sheet.

    The recipe and its steps are loaded once, before any row is read. Each
    row's step hint is matched against the step names; matched steps get
    all four requirement fields overwritten. Rows without a hint, or whose
    hint matches no step, are skipped.

    Args:
        data: Uploaded sheet content
        recipe_id: Recipe whose steps receive the requirements
        store: Entity store
        reader: Row source (default: default_reader())
        resolver: Field resolver (default: FieldResolver())
        debug: Log each match decision

    Returns:
        One StepOutcome per row that updated a step

    Raises:
        RecipeNotFoundError: If recipe_id does not exist (no step is updated)
        ValueError: If the upload cannot be read
    """
    reader = reader or default_reader()
    resolver = resolver or FieldResolver()

    try:
        recipe = store.get_recipe_with_steps(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)

        steps = list(recipe.steps)
        rows = reader.read_rows(data)

        def reconcile_row(index: int, row: Dict[str, Any]) -> Optional[StepOutcome]:
            resolved = resolver.resolve_present(row, UTILITY_REQUIREMENT_FIELDS)
            hint = resolved.get("step_name")
            if not hint:
                logger.debug(f"Skipping requirement row {index}: no step name")
                return None
            requirements = {name: resolved.get(name) for name in STEP_REQUIREMENT_FIELDS}
            return match_and_update(hint, steps, requirements, store, debug=debug)

        outcomes = _fold(rows, reconcile_row)

        if debug:
            logger.info(
                f"Utility requirement import for recipe {recipe_id}: "
                f"{len(outcomes)} of {len(rows)} rows matched a step"
            )

        return outcomes

    except Exception as e:
        logger.error(f"Utility requirement import failed: {e}", exc_info=True)
        raise


def _log_equipment_summary(label: str, outcomes: List[EquipmentOutcome]) -> None:
    created = sum(1 for outcome in outcomes if outcome.status == CREATED)
    logger.info(f"{label}: {created} created, {len(outcomes) - created} updated")
