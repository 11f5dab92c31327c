"""
Association of utility-requirement rows to recipe steps by name.

A row carries a free-text hint such as "Sterilization". It matches a step
when the hint is a case-insensitive substring of the step name ("Step 2:
Sterilization"). Steps are scanned in recipe order and the first match is
selected. Any further steps that also contain the hint are reported as
ambiguous but do not change the selection; callers needing a different
step must send a more specific hint.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, List

from ..schema import STEP_REQUIREMENT_FIELDS
from .store import EntityStore, RecipeStepRecord

logger = logging.getLogger(__name__)


@dataclass
class StepMatch:
    """The selected step and the index it was found at."""
    step: RecipeStepRecord
    index: int
    ambiguous_with: List[RecipeStepRecord] = field(default_factory=list)

    @property
    def is_ambiguous(self) -> bool:
        return bool(self.ambiguous_with)


@dataclass
class StepOutcome:
    status: str
    step: RecipeStepRecord
    hint: str
    ambiguous_with: List[str] = field(default_factory=list)


def match_step(hint: Optional[str], steps: List[RecipeStepRecord]) -> Optional[StepMatch]:
    """
    Find the first step whose name contains the hint, ignoring case.

    Args:
        hint: Step name fragment from the input row
        steps: The recipe's steps in recipe order

    Returns:
        StepMatch, or None when the hint is empty or matches nothing
    """
    needle = (hint or "").strip().casefold()
    if not needle:
        return None

    found = [
        index for index, step in enumerate(steps)
        if needle in (step.name or "").casefold()
    ]
    if not found:
        return None

    first = found[0]
    return StepMatch(
        step=steps[first],
        index=first,
        ambiguous_with=[steps[index] for index in found[1:]],
    )


def match_and_update(
    hint: Optional[str],
    steps: List[RecipeStepRecord],
    requirements: Dict[str, Optional[float]],
    store: EntityStore,
    debug: bool = False
) -> Optional[StepOutcome]:
    """
    Match a requirement row to a step and overwrite its requirement fields.

    All four requirement fields are written, whatever their previous value.
    Requirements that are missing or None are written as 0.0.

    The matched entry of `steps` is replaced by the updated record, so later
    rows in the same call see the new values.

    Args:
        hint: Step name fragment from the input row
        steps: The recipe's steps in recipe order (updated in place)
        requirements: steam/power/cooling/chilled_water _required values
        store: Entity store
        debug: Log each match decision

    Returns:
        StepOutcome, or None when no step matched
    """
    match = match_step(hint, steps)
    if match is None:
        logger.debug(f"No recipe step matches hint {hint!r}")
        return None

    if match.is_ambiguous:
        logger.warning(
            f"Step hint {hint!r} matches {len(match.ambiguous_with) + 1} steps; "
            f"using {match.step.name!r} (also matched: "
            f"{', '.join(repr(step.name) for step in match.ambiguous_with)})"
        )

    fields = {
        requirement: requirements.get(requirement) or 0.0
        for requirement in STEP_REQUIREMENT_FIELDS
    }
    updated = store.update_recipe_step(match.step.id, fields)
    steps[match.index] = updated

    if debug:
        logger.info(f"Step match: {hint!r} → step {updated.id} {updated.name!r} {fields}")

    return StepOutcome(
        status="updated",
        step=updated,
        hint=hint.strip(),
        ambiguous_with=[step.name for step in match.ambiguous_with],
    )
