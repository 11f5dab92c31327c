"""
Equipment identity resolution and create-or-merge upsert.

A candidate is matched against persisted equipment by a ranked lookup:
exact tag first, then exact name. A match is merged field by field; no
match creates a new record. Equipment is never deleted here.

Merge policy:
- A capacity is written only when the candidate carries a non-zero value.
  Absent and zero are both treated as "no information"; a capacity cannot
  be set back to zero through an update.
- The tag is overwritten only by a non-empty candidate tag.
- The name is never changed by an update.
- On creation, missing capacities are stored as 0.0.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple

from ..field_resolver import FieldResolver
from ..schema import EQUIPMENT_FIELDS, EQUIPMENT_LOAD_FIELDS, FieldSpec
from .store import EntityStore, EquipmentRecord

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"


@dataclass
class EquipmentCandidate:
    """
    Equipment data resolved from one input row or extraction entry.

    loads maps each max_*_load field to a float, or None when the input
    said nothing about it.
    """
    tag: Optional[str] = None
    name: Optional[str] = None
    loads: Dict[str, Optional[float]] = field(default_factory=dict)


@dataclass
class EquipmentOutcome:
    """Result of reconciling one candidate: what happened and to which record."""
    status: str
    equipment: EquipmentRecord
    matched_by: Optional[str] = None  # "tag" or "name" when updated


def candidate_from_row(
    row: Dict[str, Any],
    resolver: Optional[FieldResolver] = None,
    field_specs: Optional[Dict[str, FieldSpec]] = None
) -> EquipmentCandidate:
    """
    Resolve a raw energy balance row into an EquipmentCandidate.

    Explicit load columns win. A single free-text capacity column (e.g.
    "5 TPH", "300 TR") only fills loads the explicit columns left absent.

    Args:
        row: Raw row (label -> value)
        resolver: FieldResolver to use (default: FieldResolver())
        field_specs: Logical field -> FieldSpec (default: EQUIPMENT_FIELDS)

    Returns:
        EquipmentCandidate instance
    """
    resolver = resolver or FieldResolver()
    resolved = resolver.resolve_present(row, field_specs or EQUIPMENT_FIELDS)

    tag = resolved.get("tag")
    name = resolved.get("name")
    loads = {load: resolved.get(load) for load in EQUIPMENT_LOAD_FIELDS}

    capacity = resolved.get("capacity")
    if capacity:
        routed = resolver.unit_normalizer.split_capacity(tag, name, capacity)
        for load, value in routed.items():
            if loads.get(load) is None:
                loads[load] = value

    return EquipmentCandidate(tag=tag, name=name, loads=loads)


def resolve_identity(
    candidate: EquipmentCandidate,
    store: EntityStore
) -> Tuple[Optional[EquipmentRecord], Optional[str]]:
    """
    Find the persisted record a candidate refers to.

    Tag is the stronger key and is tried first; name is the fallback. Either
    is sufficient on its own.

    Args:
        candidate: Resolved candidate
        store: Entity store

    Returns:
        (record, key) where key is "tag" or "name", or (None, None)
    """
    if candidate.tag:
        record = store.find_equipment(tag=candidate.tag)
        if record is not None:
            return record, "tag"

    if candidate.name:
        record = store.find_equipment(name=candidate.name)
        if record is not None:
            return record, "name"

    return None, None


def _update_fields(candidate: EquipmentCandidate) -> Dict[str, Any]:
    fields = {}
    if candidate.tag:
        fields["tag"] = candidate.tag
    for load in EQUIPMENT_LOAD_FIELDS:
        value = candidate.loads.get(load)
        if value:
            fields[load] = value
    return fields


def _create_fields(candidate: EquipmentCandidate) -> Dict[str, Any]:
    fields = {"name": candidate.name, "tag": candidate.tag or None}
    for load in EQUIPMENT_LOAD_FIELDS:
        fields[load] = candidate.loads.get(load) or 0.0
    return fields


def reconcile_equipment(
    candidate: EquipmentCandidate,
    store: EntityStore,
    debug: bool = False
) -> Optional[EquipmentOutcome]:
    """
    Create or merge one equipment candidate.

    Args:
        candidate: Resolved candidate
        store: Entity store
        debug: Log each reconciliation decision

    Returns:
        EquipmentOutcome, or None when the candidate was skipped (no tag and
        no name, or no match and no name to create it with)
    """
    if not candidate.tag and not candidate.name:
        logger.debug("Skipping equipment candidate with neither tag nor name")
        return None

    existing, matched_by = resolve_identity(candidate, store)

    if existing is not None:
        fields = _update_fields(candidate)
        equipment = store.update_equipment(existing.id, fields)
        if debug:
            logger.info(
                f"Equipment match: tag={candidate.tag!r} name={candidate.name!r} "
                f"→ existing equipment {existing.id} by {matched_by} "
                f"(fields written: {sorted(fields) or 'none'})"
            )
        return EquipmentOutcome(status=UPDATED, equipment=equipment, matched_by=matched_by)

    if not candidate.name:
        logger.debug(f"Skipping unmatched equipment tag {candidate.tag!r}: no name to create it with")
        return None

    equipment = store.create_equipment(_create_fields(candidate))
    if debug:
        logger.info(
            f"Equipment created: tag={candidate.tag!r} name={candidate.name!r} "
            f"→ new equipment {equipment.id}"
        )
    return EquipmentOutcome(status=CREATED, equipment=equipment)
