"""Recipe suggestion engine.

Runs the acquisition pipeline once per request:

    NoSource ──────────────────────────────┐
    SourceAttempt ── error ──> Fallback ───┤
        │ ok                               ├──> Scored (terminal)
        v                                  │
      Parse ── no recipes ──> Fallback ────┤
        │ recipes                          │
        └──────────────────────────────────┘

No state is revisited and nothing is kept between runs. Failures below this
boundary are logged and compensated with the fallback catalog; callers only
ever see a list of recipes.
"""

import asyncio
import time
import uuid
from typing import List, Optional, Protocol, Tuple

from chefai.catalog.fallback import FallbackCatalog
from chefai.models.models import FallbackReason, RecipeRecord, SuggestionResult, UserProfile
from chefai.parsing.parser import parse_response
from chefai.prompts.prompts import build_recipe_prompt
from chefai.scoring.scoring import (
    SuggestionStrategy,
    apply_strategy,
    cap_count,
    filter_vegetarian,
    sort_by_time_ascending,
)
from chefai.sources.gemini import GeminiTextSource
from chefai.utils.config import Config
from chefai.utils.errors import TextSourceError
from chefai.utils.logger import logger


class TextSource(Protocol):
    """Anything that turns a prompt into a raw response body."""

    async def fetch(self, prompt: str) -> bytes: ...


class RecipeSuggestionEngine:
    """Suggest up to ``MAX_RECIPES`` recipes for a user profile."""

    def __init__(
        self,
        settings: Config,
        text_source: Optional[TextSource] = None,
        catalog: Optional[FallbackCatalog] = None,
        strategy: Optional[SuggestionStrategy] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            settings: Configuration loaded at startup. Never mutated here.
            text_source: Source to query. If None, a GeminiTextSource is built
                when ``settings`` has a usable key; otherwise every run uses
                the fallback catalog.
            catalog: Fallback catalog (default: the built-in one).
            strategy: Ranking strategy (default: ``settings.SUGGESTION_STRATEGY``).
        """
        self.settings = settings
        self.catalog = catalog if catalog is not None else FallbackCatalog()
        self.strategy = strategy or SuggestionStrategy(settings.SUGGESTION_STRATEGY)

        if text_source is None and settings.is_configured:
            text_source = GeminiTextSource.from_config(settings)
        self.text_source = text_source

    async def arun(self, user: UserProfile, strategy: Optional[SuggestionStrategy] = None) -> SuggestionResult:
        """Run the pipeline once for ``user``.

        Args:
            user: Profile to suggest for.
            strategy: Overrides the engine's strategy for this run.

        Returns:
            SuggestionResult with 1 to MAX_RECIPES recipes whenever the
            fallback catalog is non-empty.
        """
        run_id = str(uuid.uuid4())
        start_time = time.perf_counter()
        strategy = strategy or self.strategy
        limit = self.settings.MAX_RECIPES
        extra = {"run_id": run_id}

        candidates, reason = await self._acquire(user, extra)
        if reason is not None:
            logger.info(f"Fallback: {reason.value}", extra=extra)
            candidates = self.catalog.select(user, limit)

        ranked = apply_strategy(
            strategy,
            candidates,
            user,
            max_minutes=self.settings.MAX_PREP_MINUTES,
            min_compatibility=self.settings.MIN_COMPATIBILITY,
            limit=limit,
        )

        relaxed = False
        if not ranked:
            logger.info(f"No candidate passed the '{strategy.value}' strategy, relaxing filters", extra=extra)
            ranked = self._relaxed(user, limit)
            relaxed = True
            reason = reason or FallbackReason.NO_MATCHES

        source = "gemini" if reason is None else "fallback"
        execution_time_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            f"Suggested {len(ranked)} recipe(s) from {source} in {execution_time_ms}ms",
            extra={**extra, "source": source},
        )
        return SuggestionResult(
            recipes=ranked,
            source=source,
            fallback_reason=reason,
            relaxed=relaxed,
            strategy=strategy.value,
            run_id=run_id,
            execution_time_ms=execution_time_ms,
        )

    def suggest(self, user: UserProfile) -> List[RecipeRecord]:
        """Blocking entry point: ranked suggestions for ``user``.

        Must not be called from inside a running event loop; use ``arun`` there.
        """
        return asyncio.run(self.arun(user)).recipes

    def suggest_fastest(self, user: UserProfile) -> Optional[RecipeRecord]:
        """The quickest suggestion for ``user`` (first entry of a FAST run)."""
        recipes = asyncio.run(self.arun(user, strategy=SuggestionStrategy.FAST)).recipes
        return recipes[0] if recipes else None

    async def _acquire(
        self, user: UserProfile, extra: dict
    ) -> Tuple[List[RecipeRecord], Optional[FallbackReason]]:
        """Get candidates from the text source, or the reason to fall back."""
        if self.text_source is None:
            logger.info("Gemini API key not configured, using local catalog", extra=extra)
            return [], FallbackReason.NO_SOURCE

        prompt = build_recipe_prompt(
            user,
            max_recipes=self.settings.MAX_RECIPES,
            max_minutes=self.settings.MAX_PREP_MINUTES,
        )
        logger.info("Requesting recipes from Gemini...", extra=extra)
        try:
            raw = await self.text_source.fetch(prompt)
        except TextSourceError as e:
            logger.warning(f"Gemini request failed: {e}", extra=extra)
            return [], FallbackReason.TRANSPORT_FAILURE
        except Exception as e:
            logger.error(f"Unexpected text source error: {e}", exc_info=True, extra=extra)
            return [], FallbackReason.TRANSPORT_FAILURE

        recipes = parse_response(raw)
        if not recipes:
            logger.warning("Gemini returned no valid recipes", extra=extra)
            return [], FallbackReason.EMPTY_RESPONSE

        logger.info(f"{len(recipes)} recipe(s) obtained from Gemini", extra=extra)
        return recipes, None

    def _relaxed(self, user: UserProfile, limit: int) -> List[RecipeRecord]:
        """Fallback selection without the compatibility threshold.

        The vegetarian filter still applies when it leaves anything.
        """
        selection = self.catalog.select(user, limit)
        if user.is_vegetarian:
            selection = filter_vegetarian(selection) or selection
        return cap_count(sort_by_time_ascending(selection), limit)
