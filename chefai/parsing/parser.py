"""Parser for the semi-structured recipe reply.

Turns the raw generateContent response into validated RecipeRecords:

1. extract the reply text from the envelope (chefai.parsing.envelope)
2. split it on the block separator
3. parse every block on its own; a broken block costs only itself

Nothing here raises to the caller. Unusable input yields an empty list,
which the engine treats as a reason to use the fallback catalog.
"""

import re
from enum import Enum
from functools import partial
from typing import List, Optional, Union

from pydantic import ValidationError

from chefai.models.models import IngredientLedger, RecipeRecord
from chefai.parsing.block_format import (
    AFFIRMATIVE,
    BLOCK_SEPARATOR,
    DEFAULT_PREP_MINUTES,
    DURATION_PREFIX,
    INGREDIENTS_HEADER,
    STEPS_HEADER,
    TITLE_PREFIX,
    VEGETARIAN_PREFIX,
)
from chefai.parsing.envelope import extract_text_payload
from chefai.utils.errors import safe_execute_sync
from chefai.utils.logger import logger

STEP_PATTERN = re.compile(r"^\d+[.)]\s*(.*)$")
NON_DIGITS = re.compile(r"[^0-9]")


class _Section(Enum):
    INGREDIENTS = "ingredients"
    STEPS = "steps"


def _parse_duration(remainder: str) -> int:
    # "25 minutos" -> 25; nothing numeric -> default
    digits = NON_DIGITS.sub("", remainder)
    try:
        return int(digits)
    except ValueError:
        return DEFAULT_PREP_MINUTES


def _parse_ingredient(line: str) -> Optional[IngredientLedger]:
    fields = line.split(None, 1)
    if len(fields) != 2:
        return None
    try:
        quantity = int(fields[0])
    except ValueError:
        return None
    if quantity < 0:
        return None
    try:
        return IngredientLedger(name=fields[1], quantity=quantity)
    except ValidationError:
        return None


def _parse_step(line: str) -> Optional[str]:
    match = STEP_PATTERN.match(line)
    if match is None:
        return None
    step = match.group(1).strip()
    return step or None


def parse_recipe_block(block: str) -> Optional[RecipeRecord]:
    """Parse one block into a RecipeRecord.

    Recognized lines:
    - ``NOME_RECEITA:`` title, ``TEMPO:`` minutes, ``VEGETARIANA:`` SIM/NÃO
    - ``INGREDIENTES:`` / ``PASSOS:`` headers that switch the current section
    - ``<qty> <name>`` ingredient lines and ``<n>.``/``<n>)`` step lines

    Args:
        block: Text of a single block, separator already removed.

    Returns:
        RecipeRecord, or None when the block has no title or no valid ingredient.

    Raises:
        ValidationError: If the collected fields violate RecipeRecord limits
            (e.g. a title over 200 chars). parse_recipe_text absorbs this.
    """
    name: Optional[str] = None
    prep_time = DEFAULT_PREP_MINUTES
    vegetarian = False
    ingredients: List[IngredientLedger] = []
    steps: List[str] = []
    section: Optional[_Section] = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(TITLE_PREFIX):
            name = line[len(TITLE_PREFIX):].strip()
        elif line.startswith(DURATION_PREFIX):
            prep_time = _parse_duration(line[len(DURATION_PREFIX):])
        elif line.startswith(VEGETARIAN_PREFIX):
            vegetarian = line[len(VEGETARIAN_PREFIX):].strip().casefold() == AFFIRMATIVE.casefold()
        elif line == INGREDIENTS_HEADER:
            section = _Section.INGREDIENTS
        elif line == STEPS_HEADER:
            section = _Section.STEPS
        elif section is _Section.INGREDIENTS:
            ingredient = _parse_ingredient(line)
            if ingredient is not None:
                ingredients.append(ingredient)
        elif section is _Section.STEPS:
            step = _parse_step(line)
            if step is not None:
                steps.append(step)

    if not name or not ingredients:
        return None

    return RecipeRecord(
        name=name,
        prep_time_minutes=prep_time,
        is_vegetarian=vegetarian,
        ingredients=ingredients,
        steps=steps,
    )


def parse_recipe_text(text: str) -> List[RecipeRecord]:
    """Parse already-extracted reply text into records, in block order."""
    recipes: List[RecipeRecord] = []
    for index, block in enumerate(text.split(BLOCK_SEPARATOR), start=1):
        block = block.strip()
        if not block:
            continue
        recipe = safe_execute_sync(
            partial(parse_recipe_block, block),
            f"Parse recipe block {index}",
            log_level="debug",
            default_return=None,
        )
        if recipe is None:
            logger.debug(f"Discarded recipe block {index} (missing name or ingredients)")
            continue
        logger.debug(f"Parsed recipe block {index}: {recipe.name}")
        recipes.append(recipe)
    return recipes


def parse_response(raw: Union[bytes, str, None]) -> List[RecipeRecord]:
    """Parse a raw generateContent response into recipes.

    Args:
        raw: Response body as bytes or text (may be empty or malformed).

    Returns:
        Valid recipes in block order; empty list when the envelope has no
        text field or no block is usable.
    """
    payload = safe_execute_sync(
        partial(extract_text_payload, raw),
        "Extract text field from response",
        log_level="warning",
        default_return=None,
    )
    if not payload:
        logger.warning("Response has no usable text field")
        return []

    recipes = parse_recipe_text(payload)
    logger.info(f"Parsed {len(recipes)} recipe(s) from response")
    return recipes
