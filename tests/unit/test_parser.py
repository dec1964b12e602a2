"""Unit tests for the recipe block parser."""

import json

import pytest

from chefai.models.models import IngredientLedger, RecipeRecord
from chefai.parsing.block_format import BLOCK_SEPARATOR, describe_block_format, format_recipe_block
from chefai.parsing.parser import parse_recipe_block, parse_recipe_text, parse_response

OMELETE_BLOCK = """NOME_RECEITA: Omelete de Queijo
TEMPO: 10 minutos
VEGETARIANA: SIM
INGREDIENTES:
3 ovo
50 queijo
1 sal
PASSOS:
1. Bata os ovos
2) Adicione o queijo
3. Frite por 5 minutos
"""


def _envelope(text: str) -> bytes:
    return json.dumps(
        {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}, "finishReason": "STOP"}]}
    ).encode("utf-8")


class TestParseRecipeBlock:
    """Tests for parse_recipe_block."""

    def test_parses_complete_block(self) -> None:
        """Test every field of a well-formed block."""
        recipe = parse_recipe_block(OMELETE_BLOCK)

        assert recipe.name == "Omelete de Queijo"
        assert recipe.prep_time_minutes == 10
        assert recipe.is_vegetarian is True
        assert [(i.name, i.quantity) for i in recipe.ingredients] == [("ovo", 3), ("queijo", 50), ("sal", 1)]
        assert recipe.steps == ["Bata os ovos", "Adicione o queijo", "Frite por 5 minutos"]

    def test_defaults_when_time_and_flag_missing(self) -> None:
        """Test default prep time and non-vegetarian when lines are absent."""
        recipe = parse_recipe_block("NOME_RECEITA: Pão\nINGREDIENTES:\n2 pão\n")

        assert recipe.prep_time_minutes == 15
        assert recipe.is_vegetarian is False
        assert recipe.steps == []

    def test_time_without_digits_uses_default(self) -> None:
        """Test that a non-numeric TEMPO falls back to 15."""
        recipe = parse_recipe_block("NOME_RECEITA: X\nTEMPO: rápido\nINGREDIENTES:\n1 ovo\n")
        assert recipe.prep_time_minutes == 15

    @pytest.mark.parametrize("flag, expected", [("SIM", True), ("sim", True), ("NÃO", False), ("talvez", False)])
    def test_vegetarian_flag(self, flag, expected) -> None:
        """Test that only SIM (any case) marks a recipe vegetarian."""
        recipe = parse_recipe_block(f"NOME_RECEITA: X\nVEGETARIANA: {flag}\nINGREDIENTES:\n1 ovo\n")
        assert recipe.is_vegetarian is expected

    def test_missing_name_returns_none(self) -> None:
        """Test that a block without a title is discarded."""
        assert parse_recipe_block("TEMPO: 10\nINGREDIENTES:\n3 ovo\n") is None

    def test_blank_name_returns_none(self) -> None:
        """Test that an empty title is discarded."""
        assert parse_recipe_block("NOME_RECEITA:   \nINGREDIENTES:\n3 ovo\n") is None

    def test_missing_ingredients_returns_none(self) -> None:
        """Test that a block without a valid ingredient is discarded."""
        assert parse_recipe_block("NOME_RECEITA: Nada\nINGREDIENTES:\numa pitada de sal\nPASSOS:\n1. Nada\n") is None

    def test_malformed_lines_are_skipped(self) -> None:
        """Test that bad ingredient and step lines do not invalidate the block."""
        block = """NOME_RECEITA: Panqueca
INGREDIENTES:
200 farinha
farinha a gosto
-2 ovo
3
250 leite
PASSOS:
Misture tudo
1. Misture
2.
2. Frite
"""
        recipe = parse_recipe_block(block)

        assert recipe.ingredient_names() == ["farinha", "leite"]
        assert recipe.steps == ["Misture", "Frite"]

    def test_overlong_ingredient_name_drops_only_that_line(self) -> None:
        """Test that an ingredient name past 100 characters is skipped like any malformed line."""
        block = f"NOME_RECEITA: Omelete\nINGREDIENTES:\n1 {'x' * 101}\n3 ovo\n"
        recipe = parse_recipe_block(block)

        assert recipe.ingredient_names() == ["ovo"]

    def test_lines_outside_sections_are_ignored(self) -> None:
        """Test that text before the first header is not read as ingredients."""
        block = "Aqui está sua receita:\n10 dicas\nNOME_RECEITA: Salada\nINGREDIENTES:\n1 alface\n"
        recipe = parse_recipe_block(block)

        assert recipe.ingredient_names() == ["alface"]

    def test_last_title_wins(self) -> None:
        """Test that a repeated title overrides the earlier one."""
        recipe = parse_recipe_block("NOME_RECEITA: A\nNOME_RECEITA: B\nINGREDIENTES:\n1 ovo\n")
        assert recipe.name == "B"

    def test_indented_lines_are_accepted(self) -> None:
        """Test that surrounding whitespace on every line is ignored."""
        block = "  NOME_RECEITA: Ovo\n   TEMPO: 5\n  INGREDIENTES:\n   2 ovo\n  PASSOS:\n   1. Cozinhe\n"
        recipe = parse_recipe_block(block)

        assert recipe.name == "Ovo"
        assert recipe.prep_time_minutes == 5
        assert recipe.steps == ["Cozinhe"]


class TestParseRecipeText:
    """Tests for parse_recipe_text."""

    def test_blocks_parsed_independently(self) -> None:
        """Test that a broken block does not affect its neighbours."""
        text = (
            OMELETE_BLOCK
            + BLOCK_SEPARATOR
            + "\nNOME_RECEITA: Quebrada\nINGREDIENTES:\nnada aqui\n"
            + BLOCK_SEPARATOR
            + "\nNOME_RECEITA: Sanduíche\nTEMPO: 8\nINGREDIENTES:\n2 pão\n2 queijo\n"
            + BLOCK_SEPARATOR
        )
        recipes = parse_recipe_text(text)

        assert [recipe.name for recipe in recipes] == ["Omelete de Queijo", "Sanduíche"]

    def test_sections_do_not_leak_between_blocks(self) -> None:
        """Test that a block ending inside PASSOS does not make the next block's lines steps."""
        text = OMELETE_BLOCK + BLOCK_SEPARATOR + "\n1. Passo solto\nNOME_RECEITA: Y\nINGREDIENTES:\n1 ovo\n"
        recipes = parse_recipe_text(text)

        assert recipes[1].steps == []

    def test_invalid_block_is_absorbed(self) -> None:
        """Test that a block failing validation is dropped, not raised."""
        text = f"NOME_RECEITA: {'x' * 300}\nINGREDIENTES:\n1 ovo\n{BLOCK_SEPARATOR}\n{OMELETE_BLOCK}"
        recipes = parse_recipe_text(text)

        assert [recipe.name for recipe in recipes] == ["Omelete de Queijo"]

    def test_round_trip_through_block_format(self) -> None:
        """Test that format_recipe_block output parses back to the same recipe."""
        original = RecipeRecord(
            name="Torta de Frango",
            prep_time_minutes=28,
            is_vegetarian=False,
            ingredients=[IngredientLedger(name="frango desfiado", quantity=300), IngredientLedger(name="ovo", quantity=2)],
            steps=["Misture tudo", "Asse por 20 minutos"],
        )
        recipes = parse_recipe_text(format_recipe_block(original))

        assert len(recipes) == 1
        parsed = recipes[0]
        assert parsed == original
        assert parsed.prep_time_minutes == 28
        assert parsed.is_vegetarian is False
        assert parsed.ingredients == original.ingredients
        assert parsed.steps == original.steps

    def test_format_description_is_not_a_recipe(self) -> None:
        """Test that the template shown in prompts yields no recipe."""
        assert parse_recipe_text(describe_block_format()) == []

    def test_empty_text(self) -> None:
        """Test that empty or separator-only text yields nothing."""
        assert parse_recipe_text("") == []
        assert parse_recipe_text(BLOCK_SEPARATOR * 3) == []


class TestParseResponse:
    """Tests for parse_response."""

    def test_parses_generate_content_body(self) -> None:
        """Test the full path from raw bytes to recipes."""
        text = OMELETE_BLOCK + BLOCK_SEPARATOR + "\nNOME_RECEITA: Pão na Chapa\nTEMPO: 5\nVEGETARIANA: NÃO\nINGREDIENTES:\n1 pão\n" + BLOCK_SEPARATOR
        recipes = parse_response(_envelope(text))

        assert [recipe.name for recipe in recipes] == ["Omelete de Queijo", "Pão na Chapa"]
        assert recipes[1].is_vegetarian is False

    def test_accepts_str(self) -> None:
        """Test that a decoded body works too."""
        recipes = parse_response(_envelope(OMELETE_BLOCK).decode("utf-8"))
        assert len(recipes) == 1

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            b"",
            b"not json at all",
            b'{"error": {"code": 429, "message": "Resource exhausted"}}',
            _envelope(""),
            _envelope("Desculpe, não posso ajudar."),
        ],
    )
    def test_unusable_responses_yield_empty_list(self, raw) -> None:
        """Test that nothing usable means an empty list, never an exception."""
        assert parse_response(raw) == []
