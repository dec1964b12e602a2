"""Prompt construction for the Gemini text source.

The prompt tells the model to answer in the block format the parser reads.
Both the format description and the example block are generated from
chefai.parsing.block_format, so the request and the parser cannot drift
apart.
"""

from chefai.models.models import IngredientLedger, RecipeRecord, UserProfile
from chefai.parsing.block_format import describe_block_format, format_recipe_block

EXAMPLE_RECIPE = RecipeRecord(
    name="Omelete Simples",
    prep_time_minutes=10,
    is_vegetarian=True,
    ingredients=[
        IngredientLedger(name="ovo", quantity=3),
        IngredientLedger(name="queijo", quantity=50),
        IngredientLedger(name="sal", quantity=1),
    ],
    steps=[
        "Bata os ovos em uma tigela",
        "Aqueça uma frigideira antiaderente",
        "Cozinhe por 5 minutos",
    ],
)


def _get_constraints_section(user: UserProfile, max_minutes: int) -> str:
    """Numbered requirement list after the ingredient list.

    Numbering continues from the ingredient item (1.), and only the dietary
    flags the user actually has are listed.
    """
    requirements = [
        f"Sejam rápidas (máximo {max_minutes} minutos de preparo)",
        "Sejam realistas para cozinha doméstica",
    ]
    if user.is_vegetarian:
        requirements.append("Sejam VEGETARIANAS (sem carne, peixe ou frango)")
    if user.is_lactose_free:
        requirements.append("Sejam SEM LACTOSE")
    if user.is_gluten_free:
        requirements.append("Sejam SEM GLÚTEN")

    disliked = user.disliked_ingredients
    if disliked:
        names = ", ".join(ingredient.name for ingredient in disliked)
        requirements.append(f"NÃO usem estes ingredientes: {names}")

    return "\n".join(f"{index}. {text}" for index, text in enumerate(requirements, start=2))


def build_recipe_prompt(user: UserProfile, max_recipes: int = 3, max_minutes: int = 30) -> str:
    """Build the generateContent prompt for ``user``.

    Args:
        user: Profile with available ingredients and dietary flags.
        max_recipes: Number of recipes to ask for (default: 3).
        max_minutes: Preparation time ceiling stated in the prompt (default: 30).

    Returns:
        str: Prompt text in Portuguese, ending with an example block.
    """
    available = user.available_ingredients
    if available:
        ingredient_lines = "\n".join(f"   - {ingredient.quantity} {ingredient.name}" for ingredient in available)
    else:
        ingredient_lines = "   - (nenhum ingrediente informado)"

    return f"""Você é um chef de cozinha brasileiro especializado em receitas rápidas.

POR FAVOR, gere {max_recipes} receitas que:
1. Usem principalmente estes ingredientes disponíveis:
{ingredient_lines}

{_get_constraints_section(user, max_minutes)}

FORMATO EXATO DE RESPOSTA (IMPORTANTE!):
Para cada receita, forneça nestas linhas EXATAS:
{describe_block_format()}

Exemplo:
{format_recipe_block(EXAMPLE_RECIPE)}

Retorne APENAS as {max_recipes} receitas neste formato, sem explicações adicionais."""
