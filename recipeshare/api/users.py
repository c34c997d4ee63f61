# api/users.py
# Public profiles, profile updates, and per-user recipe listings.

import logging
from typing import List, Union
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

# Import local modules
from recipeshare import crud
from recipeshare import schemas
from recipeshare import models
from recipeshare.api.deps import get_own_profile, load_user
from recipeshare.core.exceptions import Conflict
from recipeshare.db.session import get_db

# Create an API router
router = APIRouter()

# Get a logger instance
logger = logging.getLogger(__name__)


@router.get("/{user_id}", response_model=schemas.UserPublic)
def read_user(db_user: models.User = Depends(load_user)):
    """
    Get a user's public profile.
    """
    return db_user


@router.put("/{user_id}", response_model=schemas.Message)
def update_user(
    user_update: schemas.UserUpdate,
    db_user: models.User = Depends(get_own_profile),
    db: Session = Depends(get_db),
):
    """
    Update the caller's own profile. Handle and email must not belong to anyone else.
    """
    handle_slug = crud.slugify_handle(user_update.handle)

    handle_owner = crud.get_user_by_handle(db, handle=handle_slug)
    if handle_owner is not None and handle_owner.id != db_user.id:
        raise Conflict("Handle already in use")

    email_owner = crud.get_user_by_email(db, email=user_update.email)
    if email_owner is not None and email_owner.id != db_user.id:
        raise Conflict("Email already in use")

    if (
        db_user.handle == handle_slug
        and db_user.name == user_update.name
        and db_user.email == user_update.email
    ):
        return {"message": "No changes detected in profile"}

    crud.update_user(db, db_user, user_update)
    logger.debug(f"User {db_user.id} updated their profile")
    return {"message": "User profile updated successfully"}


@router.get("/{user_id}/recipes", response_model=Union[List[schemas.Recipe], str])
def read_user_recipes(db_user: models.User = Depends(load_user)):
    """
    Recipes owned by a user, or an informational string when there are none.
    """
    if not db_user.recipes:
        return "No recipes found for this user, start creating some!"
    return db_user.recipes


@router.get("/{user_id}/favorites", response_model=List[schemas.Recipe])
def read_user_favorites(
    db_user: models.User = Depends(load_user),
    db: Session = Depends(get_db),
):
    """
    Recipes a user has favorited.
    """
    return crud.get_user_favorites(db, user_id=db_user.id)
