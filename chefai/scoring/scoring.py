"""Compatibility scoring, filters and suggestion strategies.

Every function here is pure: inputs are never mutated and list outputs keep
the relative order of their inputs (sorts are stable).

A strategy is an enum case plus a policy function registered in
``_POLICIES``; adding one does not touch the engine.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from chefai.models.models import RecipeRecord, UserProfile

DEFAULT_MAX_MINUTES = 30
DEFAULT_LIMIT = 3


def score(user: UserProfile, recipe: RecipeRecord) -> int:
    """Percentage (0-100) of the recipe's ingredients the user has.

    Quantities are ignored; names are compared case-insensitively.

    Example:
        User has ovo and queijo; recipe needs ovo, queijo, sal -> 66.
    """
    ingredients = recipe.ingredients
    if not ingredients:
        return 0
    matched = sum(1 for ingredient in ingredients if user.has_ingredient(ingredient.name))
    return (100 * matched) // len(ingredients)


def filter_by_max_time(recipes: Sequence[RecipeRecord], max_minutes: int) -> List[RecipeRecord]:
    return [recipe for recipe in recipes if recipe.prep_time_minutes <= max_minutes]


def filter_vegetarian(recipes: Sequence[RecipeRecord]) -> List[RecipeRecord]:
    return [recipe for recipe in recipes if recipe.is_vegetarian]


def filter_by_min_compatibility(
    recipes: Sequence[RecipeRecord], user: UserProfile, min_percent: int
) -> List[RecipeRecord]:
    return [recipe for recipe in recipes if score(user, recipe) >= min_percent]


def filter_without_disliked(recipes: Sequence[RecipeRecord], user: UserProfile) -> List[RecipeRecord]:
    """Drop recipes that use any ingredient the user dislikes."""
    return [
        recipe
        for recipe in recipes
        if not any(user.dislikes(ingredient.name) for ingredient in recipe.ingredients)
    ]


def sort_by_compatibility_descending(recipes: Sequence[RecipeRecord], user: UserProfile) -> List[RecipeRecord]:
    return sorted(recipes, key=lambda recipe: score(user, recipe), reverse=True)


def sort_by_time_ascending(recipes: Sequence[RecipeRecord]) -> List[RecipeRecord]:
    return sorted(recipes, key=lambda recipe: recipe.prep_time_minutes)


def cap_count(recipes: Sequence[RecipeRecord], limit: int) -> List[RecipeRecord]:
    return list(recipes[: max(limit, 0)])


class SuggestionStrategy(str, Enum):
    """Which composite policy ranks the candidates."""

    FAST = "fast"
    BALANCED = "balanced"

    @property
    def default_min_compatibility(self) -> int:
        return _DEFAULT_MIN_COMPATIBILITY[self]


_DEFAULT_MIN_COMPATIBILITY: Dict[SuggestionStrategy, int] = {
    SuggestionStrategy.FAST: 50,
    SuggestionStrategy.BALANCED: 60,
}


def _dietary(recipes: Sequence[RecipeRecord], user: UserProfile, max_minutes: int) -> List[RecipeRecord]:
    candidates = filter_by_max_time(recipes, max_minutes)
    if user.is_vegetarian:
        candidates = filter_vegetarian(candidates)
    return candidates


def fast_policy(
    recipes: Sequence[RecipeRecord],
    user: UserProfile,
    max_minutes: int,
    min_compatibility: int,
    limit: int,
) -> List[RecipeRecord]:
    """Quickest recipes first.

    max time -> vegetarian (if needed) -> min compatibility -> time ascending -> cap.
    """
    candidates = _dietary(recipes, user, max_minutes)
    candidates = filter_by_min_compatibility(candidates, user, min_compatibility)
    return cap_count(sort_by_time_ascending(candidates), limit)


def balanced_policy(
    recipes: Sequence[RecipeRecord],
    user: UserProfile,
    max_minutes: int,
    min_compatibility: int,
    limit: int,
) -> List[RecipeRecord]:
    """Best ingredient match first, skipping recipes with disliked ingredients.

    max time -> vegetarian (if needed) -> disliked -> min compatibility ->
    compatibility descending -> cap.
    """
    candidates = _dietary(recipes, user, max_minutes)
    candidates = filter_without_disliked(candidates, user)
    candidates = filter_by_min_compatibility(candidates, user, min_compatibility)
    return cap_count(sort_by_compatibility_descending(candidates, user), limit)


Policy = Callable[[Sequence[RecipeRecord], UserProfile, int, int, int], List[RecipeRecord]]

_POLICIES: Dict[SuggestionStrategy, Policy] = {
    SuggestionStrategy.FAST: fast_policy,
    SuggestionStrategy.BALANCED: balanced_policy,
}


def apply_strategy(
    strategy: SuggestionStrategy,
    recipes: Sequence[RecipeRecord],
    user: UserProfile,
    *,
    max_minutes: int = DEFAULT_MAX_MINUTES,
    min_compatibility: Optional[int] = None,
    limit: int = DEFAULT_LIMIT,
) -> List[RecipeRecord]:
    """Run the strategy's policy. ``min_compatibility=None`` uses the strategy default."""
    threshold = strategy.default_min_compatibility if min_compatibility is None else min_compatibility
    return _POLICIES[strategy](recipes, user, max_minutes, threshold, limit)
