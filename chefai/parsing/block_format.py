"""Line-oriented recipe block format shared by the prompt builder and the parser.

A block looks like::

    NOME_RECEITA: Omelete
    TEMPO: 10
    VEGETARIANA: SIM
    INGREDIENTES:
    3 ovo
    1 sal
    PASSOS:
    1. Bata os ovos
    2. Frite
    ---FIM_RECEITA---

Keywords are case-sensitive. The prompt asks the model for exactly this
layout, so any change here changes both what we ask for and what we accept.
"""

from chefai.models.models import RecipeRecord

TITLE_PREFIX = "NOME_RECEITA:"
DURATION_PREFIX = "TEMPO:"
VEGETARIAN_PREFIX = "VEGETARIANA:"
INGREDIENTS_HEADER = "INGREDIENTES:"
STEPS_HEADER = "PASSOS:"
BLOCK_SEPARATOR = "---FIM_RECEITA---"

AFFIRMATIVE = "SIM"
NEGATIVE = "NÃO"

DEFAULT_PREP_MINUTES = 15


def format_recipe_block(recipe: RecipeRecord) -> str:
    """Render ``recipe`` as one text block, separator included."""
    lines = [
        f"{TITLE_PREFIX} {recipe.name}",
        f"{DURATION_PREFIX} {recipe.prep_time_minutes}",
        f"{VEGETARIAN_PREFIX} {AFFIRMATIVE if recipe.is_vegetarian else NEGATIVE}",
        INGREDIENTS_HEADER,
    ]
    lines.extend(f"{ingredient.quantity} {ingredient.name}" for ingredient in recipe.ingredients)
    lines.append(STEPS_HEADER)
    lines.extend(f"{index}. {step}" for index, step in enumerate(recipe.steps, start=1))
    lines.append(BLOCK_SEPARATOR)
    return "\n".join(lines)


def describe_block_format() -> str:
    """Template lines describing the block layout, used in the prompt."""
    return "\n".join(
        [
            f"{TITLE_PREFIX} [nome completo da receita]",
            f"{DURATION_PREFIX} [tempo em minutos]",
            f"{VEGETARIAN_PREFIX} [{AFFIRMATIVE} ou {NEGATIVE}]",
            INGREDIENTS_HEADER,
            "[quantidade] [nome do ingrediente]",
            "[quantidade] [nome do ingrediente]",
            STEPS_HEADER,
            "1. [primeiro passo]",
            "2. [segundo passo]",
            BLOCK_SEPARATOR,
        ]
    )
