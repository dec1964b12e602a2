"""Local recipe catalog used when the text source is missing or unusable.

The catalog is fixed and ordered; selection is deterministic so the same
profile always gets the same fallback suggestions.
"""

from typing import Callable, List, Optional, Sequence

from chefai.models.models import IngredientLedger, RecipeRecord, UserProfile
from chefai.utils.logger import logger

DEFAULT_SELECTION_SIZE = 3


def _recipe(
    name: str,
    minutes: int,
    vegetarian: bool,
    ingredients: Sequence[tuple[str, int]],
    steps: Sequence[str],
) -> RecipeRecord:
    return RecipeRecord(
        name=name,
        prep_time_minutes=minutes,
        is_vegetarian=vegetarian,
        ingredients=[IngredientLedger(name=item, quantity=quantity) for item, quantity in ingredients],
        steps=steps,
    )


def _omelete() -> RecipeRecord:
    return _recipe(
        "Omelete de Queijo",
        12,
        False,
        [("ovo", 3), ("queijo", 100), ("sal", 1)],
        [
            "Bata os ovos com sal em uma tigela",
            "Adicione queijo ralado e misture bem",
            "Aqueça uma frigideira antiaderente em fogo médio",
            "Despeje a mistura e cozinhe por 5-7 minutos até dourar",
            "Vire com cuidado e cozinhe por mais 2 minutos",
        ],
    )


def _panquecas() -> RecipeRecord:
    return _recipe(
        "Panquecas Simples",
        18,
        True,
        [("farinha", 200), ("leite", 250), ("ovo", 2), ("açúcar", 30)],
        [
            "Misture farinha e açúcar em uma tigela grande",
            "Adicione os ovos e metade do leite, misturando bem",
            "Incorpore o restante do leite aos poucos até obter massa homogênea",
            "Aqueça uma frigideira antiaderente em fogo médio",
            "Coloque uma concha de massa e cozinhe por 2-3 minutos de cada lado",
        ],
    )


def _sanduiche() -> RecipeRecord:
    return _recipe(
        "Sanduíche Quente",
        8,
        False,
        [("pão", 2), ("queijo", 2)],
        [
            "Coloque as fatias de queijo entre as fatias de pão",
            "Aqueça uma frigideira em fogo médio",
            "Cozinhe o sanduíche por 2-3 minutos",
            "Vire e aqueça do outro lado até o queijo derreter",
            "Sirva quente",
        ],
    )


def _ovo_mexido() -> RecipeRecord:
    return _recipe(
        "Ovo Mexido Cremoso",
        10,
        True,
        [("ovo", 3), ("leite", 2), ("sal", 1)],
        [
            "Bata os ovos com o leite e o sal",
            "Derreta manteiga em uma frigideira em fogo baixo",
            "Adicione os ovos e mexa constantemente",
            "Retire do fogo quando estiver cremoso",
        ],
    )


def _salada() -> RecipeRecord:
    return _recipe(
        "Salada Completa",
        15,
        True,
        [("alface", 1), ("tomate", 2), ("cenoura", 1), ("cebola", 1), ("azeite", 2), ("vinagre", 1)],
        [
            "Lave bem todos os vegetais sob água corrente",
            "Rasgue as folhas de alface em pedaços médios",
            "Corte os tomates em cubos e a cebola em fatias finas",
            "Rale a cenoura no ralo grosso",
            "Misture os vegetais em uma tigela grande",
            "Tempere com azeite, vinagre e sal na hora de servir",
        ],
    )


def _torta_salgada() -> RecipeRecord:
    return _recipe(
        "Torta Salgada",
        30,
        False,
        [("farinha", 300), ("ovo", 2), ("queijo", 200), ("presunto", 150), ("tomate", 2)],
        [
            "Prepare a massa com farinha e ovos",
            "Recheie com queijo, presunto e tomate",
            "Asse por 20-25 minutos",
        ],
    )


DEFAULT_CATALOG: tuple[Callable[[], RecipeRecord], ...] = (
    _omelete,
    _panquecas,
    _sanduiche,
    _ovo_mexido,
    _salada,
    _torta_salgada,
)


class FallbackCatalog:
    """Fixed, ordered set of hand-written recipes.

    Recipes are rebuilt on every call, so callers never share instances.
    """

    def __init__(self, factories: Optional[Sequence[Callable[[], RecipeRecord]]] = None) -> None:
        self._factories = tuple(DEFAULT_CATALOG if factories is None else factories)

    def __len__(self) -> int:
        return len(self._factories)

    def recipes(self) -> List[RecipeRecord]:
        """All catalog recipes in catalog order."""
        return [factory() for factory in self._factories]

    def select(self, user: UserProfile, limit: int = DEFAULT_SELECTION_SIZE) -> List[RecipeRecord]:
        """Pick up to ``limit`` recipes for ``user``.

        A recipe qualifies when it respects the vegetarian flag and shares at
        least one ingredient with the user. If fewer than ``limit`` qualify,
        the list is padded with catalog recipes from the start, duplicates
        allowed, until it has ``limit`` entries or the catalog runs out.

        Args:
            user: Profile to select for.
            limit: Target size (default 3).

        Returns:
            Selected recipes; never empty unless the catalog is empty or limit < 1.
        """
        catalog = self.recipes()
        selected: List[RecipeRecord] = []

        for recipe in catalog:
            if len(selected) >= limit:
                break
            if user.is_vegetarian and not recipe.is_vegetarian:
                continue
            if any(user.has_ingredient(name) for name in recipe.ingredient_names()):
                selected.append(recipe)

        matched = len(selected)
        for recipe in catalog:
            if len(selected) >= limit:
                break
            selected.append(self._copy(recipe))

        if len(selected) > matched:
            logger.debug(f"Fallback padded with {len(selected) - matched} catalog recipe(s)")
        logger.info(f"Fallback catalog selected {len(selected)} recipe(s) ({matched} matched the profile)")
        return selected

    def _copy(self, recipe: RecipeRecord) -> RecipeRecord:
        return RecipeRecord(
            name=recipe.name,
            prep_time_minutes=recipe.prep_time_minutes,
            is_vegetarian=recipe.is_vegetarian,
            ingredients=recipe.ingredients,
            steps=recipe.steps,
        )
