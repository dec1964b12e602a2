"""Data models for the recipe suggestion pipeline.

Defines Pydantic models for ingredients, recipes, user profiles and the
engine's result. All models use Pydantic v2.

Recipes and profiles own their ingredient/step sequences privately and hand
out copies, so nothing outside the model can mutate them behind its back.
"""

from enum import Enum
from typing import Annotated, Any, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, TypeAdapter, computed_field


def _key(name: str) -> str:
    return name.strip().casefold()


class IngredientLedger(BaseModel):
    """An ingredient name with a unit-less, non-negative quantity."""

    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    name: Annotated[str, Field(min_length=1, max_length=100, description="Ingredient name (case-insensitive key)")]
    quantity: Annotated[int, Field(0, ge=0, description="Unit-less count, never negative")]

    @property
    def key(self) -> str:
        """Case-insensitive identity key."""
        return _key(self.name)

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0

    def matches(self, name: str) -> bool:
        return self.key == _key(name)

    def set_quantity(self, value: int) -> None:
        """Set the quantity; negative values are ignored."""
        if value >= 0:
            self.quantity = value

    def consume(self, amount: int) -> bool:
        """Use ``amount`` units. Returns False (and changes nothing) if there is not enough."""
        if amount < 0 or amount > self.quantity:
            return False
        self.quantity -= amount
        return True

    def __str__(self) -> str:
        return f"{self.quantity} {self.name}"


_STEP = TypeAdapter(str)


def _ledger(item: Union[IngredientLedger, Mapping[str, Any]]) -> IngredientLedger:
    """Private copy of ``item``; dumped dicts are validated back into a ledger."""
    if isinstance(item, IngredientLedger):
        return item.model_copy()
    return IngredientLedger.model_validate(item)


class RecipeRecord(BaseModel):
    """Structured recipe.

    Two records with case-insensitively equal names are the same recipe:
    equality and hashing use the name only.

    Ingredients and steps are append-only through ``add_ingredient`` /
    ``add_step``; the ``ingredients`` and ``steps`` properties return copies.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Annotated[str, Field(min_length=1, max_length=200, description="Recipe name (identity key)")]
    prep_time_minutes: Annotated[int, Field(15, ge=0, description="Preparation time in minutes")]
    is_vegetarian: Annotated[bool, Field(False, description="True if the recipe has no meat, fish or poultry")]

    _ingredients: List[IngredientLedger] = PrivateAttr(default_factory=list)
    _steps: List[str] = PrivateAttr(default_factory=list)

    def __init__(
        self,
        ingredients: Optional[Iterable[IngredientLedger]] = None,
        steps: Optional[Iterable[str]] = None,
        **data,
    ) -> None:
        super().__init__(**data)
        for ingredient in ingredients or ():
            self.add_ingredient(ingredient)
        for step in steps or ():
            self.add_step(step)

    @computed_field
    @property
    def ingredients(self) -> List[IngredientLedger]:
        """Ingredients in display order (copies)."""
        return [ingredient.model_copy() for ingredient in self._ingredients]

    @computed_field
    @property
    def steps(self) -> List[str]:
        """Steps in execution order (copy)."""
        return list(self._steps)

    def add_ingredient(self, ingredient: IngredientLedger) -> None:
        # Stored as a copy so the caller's ledger stays theirs
        self._ingredients.append(_ledger(ingredient))

    def add_step(self, step: str) -> None:
        self._steps.append(_STEP.validate_python(step).strip())

    def set_prep_time(self, minutes: int) -> None:
        """Set the preparation time; negative values are ignored."""
        if minutes >= 0:
            self.prep_time_minutes = minutes

    def ingredient_names(self) -> List[str]:
        return [ingredient.name for ingredient in self._ingredients]

    def contains_ingredient(self, name: str) -> bool:
        return any(ingredient.matches(name) for ingredient in self._ingredients)

    def first_steps(self, count: int) -> List[str]:
        return self._steps[: max(count, 0)]

    def formatted_steps(self) -> str:
        """Numbered steps, one per line."""
        if not self._steps:
            return "Nenhum passo disponível."
        return "\n".join(f"{index}. {step}" for index, step in enumerate(self._steps, start=1))

    @property
    def summary(self) -> str:
        kind = "Vegetariana" if self.is_vegetarian else "Não vegetariana"
        return f"{self.name} ({self.prep_time_minutes} min, {kind})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecipeRecord):
            return NotImplemented
        return _key(self.name) == _key(other.name)

    def __hash__(self) -> int:
        return hash(_key(self.name))

    def __str__(self) -> str:
        icon = "🥬" if self.is_vegetarian else "🍗"
        return f"{icon} {self.name} ({self.prep_time_minutes} min, {len(self._ingredients)} ingredientes)"


class UserProfile(BaseModel):
    """The person asking for suggestions: what they have, what they avoid, and dietary flags."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Annotated[str, Field(min_length=1, max_length=100, description="Display name")]
    is_vegetarian: Annotated[bool, Field(False, description="Only vegetarian recipes")]
    is_lactose_free: Annotated[bool, Field(False, description="Ask the source for lactose-free recipes")]
    is_gluten_free: Annotated[bool, Field(False, description="Ask the source for gluten-free recipes")]

    _available: List[IngredientLedger] = PrivateAttr(default_factory=list)
    _disliked: List[IngredientLedger] = PrivateAttr(default_factory=list)

    def __init__(
        self,
        available_ingredients: Optional[Iterable[IngredientLedger]] = None,
        disliked_ingredients: Optional[Iterable[IngredientLedger]] = None,
        **data,
    ) -> None:
        super().__init__(**data)
        for ingredient in available_ingredients or ():
            self.add_ingredient(ingredient)
        for ingredient in disliked_ingredients or ():
            self.add_disliked(ingredient)

    @computed_field
    @property
    def available_ingredients(self) -> List[IngredientLedger]:
        return [ingredient.model_copy() for ingredient in self._available]

    @computed_field
    @property
    def disliked_ingredients(self) -> List[IngredientLedger]:
        return [ingredient.model_copy() for ingredient in self._disliked]

    def add_ingredient(self, ingredient: IngredientLedger) -> None:
        self._available.append(_ledger(ingredient))

    def remove_ingredient(self, name: str) -> bool:
        """Remove the first available ingredient matching ``name``. Returns False if none matched."""
        for index, ingredient in enumerate(self._available):
            if ingredient.matches(name):
                del self._available[index]
                return True
        return False

    def has_ingredient(self, name: str) -> bool:
        return any(ingredient.matches(name) for ingredient in self._available)

    def get_ingredient(self, name: str) -> Optional[IngredientLedger]:
        for ingredient in self._available:
            if ingredient.matches(name):
                return ingredient.model_copy()
        return None

    def add_disliked(self, ingredient: IngredientLedger) -> None:
        self._disliked.append(_ledger(ingredient))

    def dislikes(self, name: str) -> bool:
        return any(ingredient.matches(name) for ingredient in self._disliked)


class FallbackReason(str, Enum):
    """Why a run used the local catalog instead of the text source."""

    NO_SOURCE = "no_source"
    TRANSPORT_FAILURE = "transport_failure"
    EMPTY_RESPONSE = "empty_response"
    # The strategy rejected every candidate from the source
    NO_MATCHES = "no_matches"


class SuggestionResult(BaseModel):
    """Outcome of one engine run.

    ``relaxed`` is set when the strategy filtered out every candidate and the
    engine returned the constraint-aware fallback selection instead.
    """

    recipes: Annotated[List[RecipeRecord], Field(default_factory=list, description="Ranked suggestions (max 3 by default)")]
    source: Annotated[str, Field(description='"gemini" or "fallback"')]
    fallback_reason: Annotated[Optional[FallbackReason], Field(None, description="Set when source is fallback")]
    relaxed: Annotated[bool, Field(False, description="True if the strategy's filters were relaxed")]
    strategy: Annotated[str, Field("fast", description="Suggestion strategy used")]
    run_id: Annotated[Optional[str], Field(None, description="Unique ID for this engine run")]
    execution_time_ms: Annotated[
        int, Field(0, ge=0, description="Execution time in milliseconds")
    ]
