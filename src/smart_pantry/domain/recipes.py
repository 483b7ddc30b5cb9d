"""Domain models for recipe suggestions."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class RecipeCandidate(BaseModel):
    """A recipe proposed by the generator or the static catalog."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    title: str = Field(min_length=1)
    used_ingredients: list[str] = Field(alias="usedIngredients")
    missing_ingredients: list[str] = Field(alias="missingIngredients")
    time: str
    calories: int = Field(ge=0)
    instructions: list[str] = Field(default_factory=list)
    dietary: list[str] = Field(default_factory=list)


class SuggestionSource(StrEnum):
    """Where a set of suggestions came from."""

    GENERATOR = "generator"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ScoredRecipe:
    """Recipe candidate with its match score and display image."""

    title: str
    used_ingredients: list[str]
    missing_ingredients: list[str]
    time: str
    calories: int
    instructions: list[str]
    dietary: list[str]
    match_percentage: int
    image: str
    personalized: bool


@dataclass(frozen=True)
class RecipeSuggestions:
    """Ranked recipes returned for one request."""

    recipes: list[ScoredRecipe]
    personalized: bool
    source: SuggestionSource
