"""Recipe suggestion endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict

from smart_pantry.api.dependencies import current_user_id, success

if TYPE_CHECKING:
    from smart_pantry.containers import AppContainer

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

_logger = logging.getLogger(__name__)


class SuggestRequest(BaseModel):
    """Body of a recipe suggestion request."""

    model_config = ConfigDict(extra="forbid")

    dietary: str | None = None
    mode: Literal["inventory", "cookbook"] = "inventory"


@router.post("/suggest")
async def suggest_recipes(
    request: Request,
    body: SuggestRequest | None = None,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Suggest recipes from inventory; an empty inventory gives cookbook mode."""
    container: AppContainer = request.app.state.container
    options = body or SuggestRequest()
    suggestions = await container.recipe_service.suggest(
        user_id, options.dietary, cookbook=options.mode == "cookbook"
    )
    return success(suggestions)


@router.get("/suggest")
async def suggest_from_inventory(
    request: Request,
    dietary: str | None = None,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Suggest recipes; fails when the inventory is empty."""
    container: AppContainer = request.app.state.container
    suggestions = await container.recipe_service.suggest_from_inventory(
        user_id, dietary
    )
    _logger.info(
        "Suggested %s recipes (source=%s)",
        len(suggestions.recipes),
        suggestions.source,
    )
    return success(suggestions)
