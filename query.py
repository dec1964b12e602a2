#!/usr/bin/env python3
"""Ad hoc query runner for the ChefAI recipe suggestion engine.

Ask for suggestions directly from the command line.

Usage:
    python query.py "4 ovo, 150 queijo, farinha"
    python query.py --vegetarian "3 ovo, 250 leite"
    python query.py --strategy balanced --avoid "presunto" "ovo, queijo, farinha"
    python query.py --debug "ovo, queijo"  # Show full JSON result

Features:
- Ingredient list as "<quantity> <name>" items separated by commas
  (quantity optional, defaults to 1)
- Dietary flags and disliked ingredients
- Compatibility and availability shown for each suggestion
- Debug mode to display the full SuggestionResult as JSON
"""

import asyncio
import sys
from typing import List

from rich.console import Console

from chefai.engine.engine import RecipeSuggestionEngine
from chefai.models.models import IngredientLedger, RecipeRecord, UserProfile
from chefai.scoring.scoring import SuggestionStrategy, score
from chefai.utils.config import config
from chefai.utils.logger import logger

console = Console()

USAGE = (
    'Usage: python query.py [--debug] [--vegetarian] [--lactose-free] [--gluten-free] '
    '[--strategy fast|balanced] [--avoid "name,..."] "<ingredients>"'
)


def parse_ingredient_list(text: str) -> List[IngredientLedger]:
    """Parse "4 ovo, 150 queijo, sal" into ingredient ledgers.

    Items without a leading integer get quantity 1. Empty items are skipped.
    Negative quantities are rejected by the model and skipped as well.
    """
    ingredients = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        parts = item.split(None, 1)
        quantity, name = 1, item
        if len(parts) == 2:
            try:
                quantity, name = int(parts[0]), parts[1]
            except ValueError:
                pass
        if quantity < 0:
            logger.warning(f"Ignoring '{item}': negative quantity")
            continue
        ingredients.append(IngredientLedger(name=name, quantity=quantity))
    return ingredients


def render_recipe(index: int, recipe: RecipeRecord, user: UserProfile) -> None:
    """Print one suggestion with its compatibility and ingredient availability."""
    kind = "[green]vegetariana[/green]" if recipe.is_vegetarian else "[yellow]não vegetariana[/yellow]"
    console.print(f"[bold cyan]{index}. {recipe.name}[/bold cyan]")
    console.print(
        f"   ⏱️  {recipe.prep_time_minutes} min | {kind} | compatibilidade: [bold]{score(user, recipe)}%[/bold]"
    )
    console.print("   [bold]Ingredientes:[/bold]")
    for ingredient in recipe.ingredients:
        mark = "✅" if user.has_ingredient(ingredient.name) else "❌"
        console.print(f"     {mark} {ingredient}")
    console.print("   [bold]Modo de preparo:[/bold]")
    for line in recipe.formatted_steps().splitlines():
        console.print(f"     {line}")
    console.print()


def run_query(user: UserProfile, strategy: SuggestionStrategy, debug: bool = False) -> None:
    """Run the engine once for ``user`` and print the suggestions.

    Args:
        user: Profile built from the command line.
        strategy: Ranking strategy for this run.
        debug: If True, display the full result as JSON.
    """
    try:
        engine = RecipeSuggestionEngine(config, strategy=strategy)
        result = asyncio.run(engine.arun(user))

        console.print()
        if debug:
            console.print("[bold cyan]Debug Mode: Full Result[/bold cyan]")
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print_json(data=result.model_dump(mode="json"))
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print()

        if result.source == "fallback":
            console.print(f"[yellow]Receitas do catálogo local ({result.fallback_reason.value})[/yellow]")
        if result.relaxed:
            console.print("[yellow]Nenhuma receita atendeu todos os critérios; mostrando as mais próximas.[/yellow]")

        if not result.recipes:
            console.print("[yellow]Nenhuma receita encontrada[/yellow]")
            return

        for index, recipe in enumerate(result.recipes, start=1):
            render_recipe(index, recipe, user)

    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Query execution failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(USAGE)
        print("")
        print("Examples:")
        print('  python query.py "4 ovo, 150 queijo, 200 farinha"')
        print('  python query.py --vegetarian "3 ovo, 250 leite"')
        print('  python query.py --strategy balanced --avoid "presunto" "ovo, queijo"')
        print('  python query.py --debug "ovo, queijo"')
        sys.exit(1)

    debug_mode = False
    vegetarian = False
    lactose_free = False
    gluten_free = False
    strategy = SuggestionStrategy(config.SUGGESTION_STRATEGY)
    avoid = ""
    argv_start = 1

    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        flag = sys.argv[argv_start]
        if flag == "--debug":
            debug_mode = True
            argv_start += 1
        elif flag == "--vegetarian":
            vegetarian = True
            argv_start += 1
        elif flag == "--lactose-free":
            lactose_free = True
            argv_start += 1
        elif flag == "--gluten-free":
            gluten_free = True
            argv_start += 1
        elif flag in ("--strategy", "--avoid"):
            argv_start += 1
            if argv_start >= len(sys.argv):
                print(f"Error: {flag} flag requires a value")
                sys.exit(1)
            value = sys.argv[argv_start]
            argv_start += 1
            if flag == "--avoid":
                avoid = value
                continue
            try:
                strategy = SuggestionStrategy(value.lower())
            except ValueError:
                print(f"Error: unknown strategy '{value}' (expected fast or balanced)")
                sys.exit(1)
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    if argv_start >= len(sys.argv):
        print("Error: No ingredients provided")
        print(USAGE)
        sys.exit(1)

    # Join all arguments after flags as the ingredient list (handles lists with spaces)
    user = UserProfile(
        name="Usuário",
        is_vegetarian=vegetarian,
        is_lactose_free=lactose_free,
        is_gluten_free=gluten_free,
        available_ingredients=parse_ingredient_list(" ".join(sys.argv[argv_start:])),
        disliked_ingredients=[IngredientLedger(name=name, quantity=0) for name in avoid.split(",") if name.strip()],
    )

    run_query(user, strategy, debug=debug_mode)
