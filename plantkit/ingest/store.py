"""
Entity store interface and the records it hands back.

The store exclusively owns persisted state. Ingestion holds only call-scoped
views: the row sequence, the resolved candidates and the step list of one
recipe. Every method is a blocking call; implementations are expected to
commit each write on its own (there is no ingestion-level transaction, so
rows written before a later failure stay written).
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List


class RecipeNotFoundError(ValueError):
    """The recipe an ingestion call targets does not exist."""

    def __init__(self, recipe_id: int):
        super().__init__(f"Recipe {recipe_id} not found")
        self.recipe_id = recipe_id


@dataclass
class EquipmentRecord:
    """
    A physical process unit.

    Capacities are in tonnes/hour (steam), kilowatts (power) and tons of
    refrigeration (cooling, chilled water).
    """
    id: int
    name: str
    tag: Optional[str] = None
    max_steam_load: float = 0.0
    max_power_load: float = 0.0
    max_cooling_load: float = 0.0
    max_chilled_water_load: float = 0.0


@dataclass
class RecipeStepRecord:
    """One operation of a recipe and the utilities it consumes."""
    id: int
    recipe_id: int
    name: str
    step_number: Optional[int] = None
    steam_required: float = 0.0
    power_required: float = 0.0
    cooling_required: float = 0.0
    chilled_water_required: float = 0.0


@dataclass
class RecipeRecord:
    id: int
    name: str
    steps: List[RecipeStepRecord] = field(default_factory=list)


class EntityStore:
    """
    Abstract entity store interface.

    Implement this interface with your actual persistence layer
    (see PostgresStore for a psycopg2 implementation).
    """

    def find_equipment(
        self,
        tag: Optional[str] = None,
        name: Optional[str] = None
    ) -> Optional[EquipmentRecord]:
        """
        Find one equipment record whose tag equals `tag` or whose name equals `name`.

        Keys passed as None are not matched. If several records match, the
        store decides which one is returned.

        Args:
            tag: External equipment code
            name: Free-text equipment label

        Returns:
            The matching record, or None
        """
        raise NotImplementedError

    def create_equipment(self, fields: Dict[str, Any]) -> EquipmentRecord:
        """
        Create an equipment record.

        Args:
            fields: name, tag and the four max_*_load capacities

        Returns:
            The created record with its store-assigned id
        """
        raise NotImplementedError

    def update_equipment(
        self,
        equipment_id: int,
        fields: Dict[str, Any]
    ) -> EquipmentRecord:
        """
        Update the given fields of an equipment record.

        Fields not present in `fields` are left untouched. An empty dict is
        allowed and returns the record unchanged.

        Returns:
            The record after the update
        """
        raise NotImplementedError

    def get_recipe_with_steps(self, recipe_id: int) -> Optional[RecipeRecord]:
        """
        Load a recipe together with its ordered steps.

        Returns:
            The recipe, or None if it does not exist
        """
        raise NotImplementedError

    def update_recipe_step(
        self,
        step_id: int,
        fields: Dict[str, Any]
    ) -> RecipeStepRecord:
        """
        Update the given requirement fields of a recipe step.

        Returns:
            The step after the update
        """
        raise NotImplementedError
