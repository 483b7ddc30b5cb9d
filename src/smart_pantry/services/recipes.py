"""Recipe suggestion service: generator calls, scoring and offline fallback."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from smart_pantry.domain.errors import (
    ExternalServiceError,
    RecipeParseError,
    ValidationError,
)
from smart_pantry.domain.freshness import sort_by_expiry
from smart_pantry.domain.inventory import Ingredient
from smart_pantry.domain.recipes import (
    RecipeCandidate,
    RecipeSuggestions,
    ScoredRecipe,
    SuggestionSource,
)
from smart_pantry.services.generation import GenerativeClient, strip_code_fence
from smart_pantry.services.inventory import InventoryRepository

_logger = logging.getLogger(__name__)

_CANDIDATES = TypeAdapter(list[RecipeCandidate])

RECIPE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "recipes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "usedIngredients": {"type": "array", "items": {"type": "string"}},
                    "missingIngredients": {
                        "type": "array",
                        "items": {"type": "string"},
                    },
                    "time": {"type": "string"},
                    "calories": {"type": "integer", "minimum": 0},
                    "instructions": {"type": "array", "items": {"type": "string"}},
                    "dietary": {"type": "array", "items": {"type": "string"}},
                },
                "required": [
                    "title",
                    "usedIngredients",
                    "missingIngredients",
                    "time",
                    "calories",
                    "instructions",
                    "dietary",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["recipes"],
    "additionalProperties": False,
}

DEFAULT_RECIPE_IMAGE = (
    "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?w=400&h=300&fit=crop"
)
_RECIPE_IMAGES: list[tuple[tuple[str, ...], str]] = [
    (
        ("pasta", "spaghetti"),
        "https://images.unsplash.com/photo-1621996346565-e3dbc646d9a9?w=400&h=300&fit=crop",
    ),
    (
        ("chicken",),
        "https://images.unsplash.com/photo-1598515214211-89d3c73ae83b?w=400&h=300&fit=crop",
    ),
    (
        ("salad",),
        "https://images.unsplash.com/photo-1512621776951-a57141f2eefd?w=400&h=300&fit=crop",
    ),
    (
        ("soup",),
        "https://images.unsplash.com/photo-1547592166-23ac45744acd?w=400&h=300&fit=crop",
    ),
    (
        ("egg", "breakfast"),
        "https://images.unsplash.com/photo-1608039829572-9b59f7e06c9e?w=400&h=300&fit=crop",
    ),
    (
        ("yogurt", "parfait"),
        "https://images.unsplash.com/photo-1488477181946-6428a0291777?w=400&h=300&fit=crop",
    ),
]

STATIC_CATALOG: tuple[RecipeCandidate, ...] = (
    RecipeCandidate(
        title="Creamy Chicken Spinach Pasta",
        used_ingredients=["Chicken Breast", "Spinach", "Parmesan"],
        missing_ingredients=["Pasta", "Heavy Cream"],
        time="25 min",
        calories=450,
    ),
    RecipeCandidate(
        title="Classic Eggs Benedict",
        used_ingredients=["Eggs"],
        missing_ingredients=["English Muffin", "Ham"],
        time="30 min",
        calories=520,
    ),
    RecipeCandidate(
        title="Greek Yogurt Parfait",
        used_ingredients=["Greek Yogurt"],
        missing_ingredients=["Granola", "Berries"],
        time="5 min",
        calories=280,
    ),
    RecipeCandidate(
        title="Tomato Basil Soup",
        used_ingredients=["Tomato Sauce"],
        missing_ingredients=["Basil", "Cream"],
        time="40 min",
        calories=210,
    ),
)


def match_percentage(on_hand: int, missing: int) -> int:
    """Return ``on_hand / (on_hand + missing)`` as a half-up rounded percentage."""
    total = on_hand + missing
    if total <= 0:
        return 0
    return (200 * on_hand + total) // (2 * total)


def recipe_image(title: str) -> str:
    """Pick a placeholder image from keywords in the title."""
    lowered = title.lower()
    for keywords, url in _RECIPE_IMAGES:
        if any(keyword in lowered for keyword in keywords):
            return url
    return DEFAULT_RECIPE_IMAGE


def _scored(
    candidate: RecipeCandidate, percentage: int, *, personalized: bool
) -> ScoredRecipe:
    return ScoredRecipe(
        title=candidate.title,
        used_ingredients=list(candidate.used_ingredients),
        missing_ingredients=list(candidate.missing_ingredients),
        time=candidate.time,
        calories=candidate.calories,
        instructions=list(candidate.instructions),
        dietary=list(candidate.dietary),
        match_percentage=percentage,
        image=recipe_image(candidate.title),
        personalized=personalized,
    )


def score(candidate: RecipeCandidate, *, cookbook: bool = False) -> ScoredRecipe:
    """Score a generated recipe.

    In inventory mode the match is the share of the recipe's ingredients the
    generator marked as used. In cookbook mode every recipe scores 0 and is
    flagged as not personalized.
    """
    if cookbook:
        return _scored(candidate, 0, personalized=False)
    percentage = match_percentage(
        len(candidate.used_ingredients), len(candidate.missing_ingredients)
    )
    return _scored(candidate, percentage, personalized=True)


def rank(recipes: Sequence[ScoredRecipe]) -> list[ScoredRecipe]:
    """Order by descending match; equal scores keep their original order."""
    return sorted(recipes, key=lambda recipe: recipe.match_percentage, reverse=True)


def available_ingredients(
    required: Sequence[str], inventory: Sequence[Ingredient]
) -> list[str]:
    """Return required names whose first word appears in an inventory item name."""
    names = [item.name.lower() for item in inventory]
    available = []
    for ingredient in required:
        words = ingredient.lower().split()
        if not words:
            continue
        if any(words[0] in name for name in names):
            available.append(ingredient)
    return available


def fallback_match(
    inventory: Sequence[Ingredient],
    catalog: Sequence[RecipeCandidate] = STATIC_CATALOG,
) -> list[ScoredRecipe]:
    """Score a static catalog against inventory without any external call."""
    scored = []
    for candidate in catalog:
        available = available_ingredients(candidate.used_ingredients, inventory)
        percentage = match_percentage(
            len(available), len(candidate.missing_ingredients)
        )
        scored.append(_scored(candidate, percentage, personalized=True))
    return rank(scored)


def parse_recipe_candidates(raw: str) -> list[RecipeCandidate]:
    """Parse generator output into validated candidates, all or nothing."""
    text = strip_code_fence(raw)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecipeParseError("Recipe generator returned invalid JSON") from exc
    if isinstance(payload, dict) and "recipes" in payload:
        payload = payload["recipes"]
    try:
        return _CANDIDATES.validate_python(payload)
    except PydanticValidationError as exc:
        raise RecipeParseError(
            f"Recipe generator returned malformed recipes: {exc.error_count()} errors"
        ) from exc


def build_recipe_prompt(
    inventory: Sequence[Ingredient], dietary: str | None, count: int
) -> str:
    """Build the generator prompt, listing soonest-expiring items first."""
    restriction = f" Every recipe must be {dietary}." if dietary else ""
    if not inventory:
        return (
            f"Suggest {count} diverse, popular home recipes.{restriction} "
            "List all ingredients under missingIngredients and leave "
            "usedIngredients empty. Include realistic cooking time, calories "
            "per serving and step-by-step instructions."
        )
    lines = "\n".join(
        f"- {item.name} (expires {item.expiry_date.isoformat()})"
        for item in sort_by_expiry(inventory)
    )
    return (
        f"Suggest {count} diverse recipes that use these pantry ingredients, "
        f"prioritizing the ones that expire soonest.{restriction}\n"
        f"Available ingredients:\n{lines}\n"
        "Put ingredients taken from the list under usedIngredients and any "
        "other required ingredient under missingIngredients. Include realistic "
        "cooking time, calories per serving and step-by-step instructions."
    )


@dataclass
class RecipeService:
    """Service producing ranked recipe suggestions for a user."""

    client: GenerativeClient
    inventory_repository: InventoryRepository
    model: str
    recipe_count: int = 4

    async def suggest(
        self, owner_id: UUID, dietary: str | None = None, *, cookbook: bool = False
    ) -> RecipeSuggestions:
        """Suggest recipes from the user's inventory, or cookbook recipes."""
        inventory = (
            [] if cookbook else self.inventory_repository.list_items(owner_id)
        )
        return await self._generate(
            inventory, dietary, cookbook=cookbook or not inventory
        )

    async def suggest_from_inventory(
        self, owner_id: UUID, dietary: str | None = None
    ) -> RecipeSuggestions:
        """Suggest recipes, requiring a non-empty inventory."""
        inventory = self.inventory_repository.list_items(owner_id)
        if not inventory:
            raise ValidationError("No ingredients in inventory. Add items first.")
        return await self._generate(inventory, dietary, cookbook=False)

    async def _generate(
        self, inventory: list[Ingredient], dietary: str | None, *, cookbook: bool
    ) -> RecipeSuggestions:
        prompt = build_recipe_prompt(inventory, dietary, self.recipe_count)
        try:
            raw = await self.client.generate(
                model=self.model,
                prompt=prompt,
                schema=RECIPE_SCHEMA,
                schema_name="recipe_suggestions",
            )
            candidates = parse_recipe_candidates(raw)
        except ExternalServiceError as exc:
            _logger.warning("Recipe generation failed, using fallback: %s", exc)
            return self._fallback(inventory, cookbook=cookbook)
        _logger.info(
            "Generated %s recipes for %s ingredients", len(candidates), len(inventory)
        )
        recipes = rank(
            [score(candidate, cookbook=cookbook) for candidate in candidates]
        )
        return RecipeSuggestions(
            recipes=recipes,
            personalized=not cookbook,
            source=SuggestionSource.GENERATOR,
        )

    @staticmethod
    def _fallback(
        inventory: list[Ingredient], *, cookbook: bool
    ) -> RecipeSuggestions:
        if cookbook:
            recipes = [score(candidate, cookbook=True) for candidate in STATIC_CATALOG]
        else:
            recipes = fallback_match(inventory)
        return RecipeSuggestions(
            recipes=recipes,
            personalized=not cookbook,
            source=SuggestionSource.FALLBACK,
        )
