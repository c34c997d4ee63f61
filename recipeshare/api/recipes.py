# api/recipes.py
# Handles all API endpoints related to recipes, including likes and favorites.

import logging
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List

# Import local modules
from recipeshare import crud
from recipeshare import schemas
from recipeshare import models
from recipeshare.api.deps import (
    get_current_principal,
    get_deletable_recipe,
    get_updatable_recipe,
    load_recipe,
)
from recipeshare.db.session import get_db

# Create an API router
router = APIRouter()

# Get a logger instance
logger = logging.getLogger(__name__)


@router.post("", response_model=schemas.Recipe, status_code=status.HTTP_201_CREATED)
def create_recipe(
        recipe: schemas.RecipeCreate,
        principal: schemas.Principal = Depends(get_current_principal),
        db: Session = Depends(get_db),
):
    """
    Create a new recipe owned by the authenticated user.
    """
    logger.debug(f"User {principal.id} is creating a new recipe.")
    return crud.create_user_recipe(db=db, recipe=recipe, user_id=principal.id)


@router.get("", response_model=List[schemas.Recipe])
def read_recipes(
        response: Response,
        skip: int = Query(default=0, ge=0, description="Number of records to skip for pagination"),
        limit: int = Query(default=100, ge=1, le=1000, description="Maximum number of records to return (1-1000)"),
        db: Session = Depends(get_db),
):
    """
    Retrieve a list of all recipes.
    """
    logger.debug(f"Fetching all recipes with skip={skip}, limit={limit}.")
    recipes, total_count = crud.get_recipes(db, skip=skip, limit=limit)
    response.headers["X-Total-Count"] = str(total_count)
    return recipes


@router.get("/{recipe_id}", response_model=schemas.Recipe)
def read_recipe(db_recipe: models.Recipe = Depends(load_recipe)):
    """
    Retrieve a single recipe by its ID.
    """
    return db_recipe


@router.put("/{recipe_id}", response_model=schemas.RecipeUpdateResult)
def update_recipe(
        recipe: schemas.RecipeCreate,
        db_recipe: models.Recipe = Depends(get_updatable_recipe),
        db: Session = Depends(get_db),
):
    """
    Update a recipe. Only the owner of the recipe can perform this action.
    Submitting the recipe's current content is a no-op and writes nothing.
    """
    if not crud.recipe_has_changes(db_recipe, recipe):
        logger.debug(f"No changes for recipe {db_recipe.id}, skipping write.")
        return {
            "message": "No changes detected, recipe remains the same",
            "changed": False,
            "recipe": db_recipe,
        }

    updated = crud.update_recipe(db=db, db_recipe=db_recipe, recipe_update=recipe)
    return {"message": "Recipe updated successfully", "changed": True, "recipe": updated}


@router.delete("/{recipe_id}", response_model=schemas.Message)
def delete_recipe(
        db_recipe: models.Recipe = Depends(get_deletable_recipe),
        db: Session = Depends(get_db),
):
    """
    Delete a recipe. Only the owner of the recipe can perform this action.
    """
    crud.delete_recipe(db=db, db_recipe=db_recipe)
    return {"message": "Recipe deleted successfully"}


# --- Likes & Favorites ---
# Idempotent toggles: liking twice or unliking a recipe that was never liked
# leaves the set unchanged and still answers 200 with the current count.

@router.post("/{recipe_id}/like", response_model=schemas.LikeCount)
def like_recipe(
        principal: schemas.Principal = Depends(get_current_principal),
        db_recipe: models.Recipe = Depends(load_recipe),
        db: Session = Depends(get_db),
):
    count = crud.add_member(db, models.recipe_likes, db_recipe.id, principal.id)
    return {"likes": count}


@router.delete("/{recipe_id}/like", response_model=schemas.LikeCount)
def unlike_recipe(
        principal: schemas.Principal = Depends(get_current_principal),
        db_recipe: models.Recipe = Depends(load_recipe),
        db: Session = Depends(get_db),
):
    count = crud.remove_member(db, models.recipe_likes, db_recipe.id, principal.id)
    return {"likes": count}


@router.post("/{recipe_id}/favorite", response_model=schemas.FavoriteCount)
def favorite_recipe(
        principal: schemas.Principal = Depends(get_current_principal),
        db_recipe: models.Recipe = Depends(load_recipe),
        db: Session = Depends(get_db),
):
    count = crud.add_member(db, models.recipe_favorites, db_recipe.id, principal.id)
    return {"favorites": count}


@router.delete("/{recipe_id}/favorite", response_model=schemas.FavoriteCount)
def unfavorite_recipe(
        principal: schemas.Principal = Depends(get_current_principal),
        db_recipe: models.Recipe = Depends(load_recipe),
        db: Session = Depends(get_db),
):
    count = crud.remove_member(db, models.recipe_favorites, db_recipe.id, principal.id)
    return {"favorites": count}
