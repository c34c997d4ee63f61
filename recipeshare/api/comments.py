# api/comments.py
# Comment endpoints, nested under their recipe.

import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

# Import local modules
from recipeshare import crud
from recipeshare import schemas
from recipeshare import models
from recipeshare.api.deps import get_current_principal, get_deletable_comment, load_recipe
from recipeshare.db.session import get_db

# Create an API router
router = APIRouter()

# Get a logger instance
logger = logging.getLogger(__name__)


@router.get("/{recipe_id}/comments", response_model=List[schemas.Comment])
def read_comments(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db_recipe: models.Recipe = Depends(load_recipe),
    db: Session = Depends(get_db),
):
    """
    Get comments for a recipe, latest first.
    """
    return crud.get_comments(db=db, recipe_id=db_recipe.id, skip=skip, limit=limit)


@router.post("/{recipe_id}/comments", response_model=schemas.Comment, status_code=status.HTTP_201_CREATED)
def create_comment(
    comment: schemas.CommentCreate,
    principal: schemas.Principal = Depends(get_current_principal),
    db_recipe: models.Recipe = Depends(load_recipe),
    db: Session = Depends(get_db),
):
    """
    Add a comment to a recipe.
    """
    logger.debug(f"User {principal.id} is commenting on recipe {db_recipe.id}")
    return crud.create_comment(db=db, comment=comment, user_id=principal.id, recipe_id=db_recipe.id)


@router.delete("/{recipe_id}/comments/{comment_id}", response_model=schemas.Message)
def delete_comment(
    db_comment: models.Comment = Depends(get_deletable_comment),
    db: Session = Depends(get_db),
):
    """
    Delete a comment. Only its author can, and only through the recipe it belongs to.
    """
    crud.delete_comment(db=db, db_comment=db_comment)
    return {"message": "Comment deleted successfully"}
