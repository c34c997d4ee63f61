"""
Request pipeline stages shared by the routers.

Each stage is a FastAPI dependency that returns an explicit value to the next
one: the authentication gate yields a Principal, loaders yield the entity they
looked up, and the ownership stages yield the entity once the caller is allowed
to change it. Path identifiers are typed as UUID, so malformed ids are rejected
by request validation before any loader touches the database.
"""

import logging
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from recipeshare import crud, models, schemas
from recipeshare.core.exceptions import BadRequest, Forbidden, NotFound, Unauthenticated
from recipeshare.core.security import InvalidToken, decode_access_token
from recipeshare.db.session import get_db

logger = logging.getLogger(__name__)

# auto_error is off so a missing header maps to 401 rather than FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


# --- Authentication Gate ---

async def get_current_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> schemas.Principal:
    """
    Resolves the caller from the bearer token. No database lookup is made;
    the token's claims are trusted until it expires.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    try:
        claims = decode_access_token(credentials.credentials)
    except InvalidToken:
        raise Forbidden()

    principal = schemas.Principal(
        id=claims["sub"], handle=claims.get("handle"), email=claims.get("email")
    )
    # Read by the structured logging middleware only
    request.state.principal = principal
    return principal


# --- Ownership & Authorization Policy ---

def authorize(principal: schemas.Principal, owner_id: UUID, action: str = "modify this resource") -> None:
    """
    Permits only when the entity's owner is the caller. There is no elevated role.
    """
    if owner_id != principal.id:
        logger.warning(f"User {principal.id} is not authorized to {action}")
        raise Forbidden(f"Unauthorized to {action}")


# --- Resource Loaders ---

def load_user(user_id: UUID, db: Session = Depends(get_db)) -> models.User:
    db_user = crud.get_user(db, user_id=user_id)
    if db_user is None:
        logger.warning(f"User with ID {user_id} not found.")
        raise NotFound("User")
    return db_user


def load_recipe(recipe_id: UUID, db: Session = Depends(get_db)) -> models.Recipe:
    db_recipe = crud.get_recipe(db, recipe_id=recipe_id)
    if db_recipe is None:
        logger.warning(f"Recipe with ID {recipe_id} not found.")
        raise NotFound("Recipe")
    return db_recipe


def load_comment(recipe_id: UUID, comment_id: UUID, db: Session = Depends(get_db)) -> models.Comment:
    # recipe_id is declared so both path ids are validated before the lookup
    db_comment = crud.get_comment(db, comment_id=comment_id)
    if db_comment is None:
        logger.warning(f"Comment with ID {comment_id} not found.")
        raise NotFound("Comment")
    return db_comment


# --- Composed Stages ---
# The principal is declared first so authentication runs before the lookup.

def get_own_profile(
    principal: schemas.Principal = Depends(get_current_principal),
    db_user: models.User = Depends(load_user),
) -> models.User:
    authorize(principal, db_user.id, "update this profile")
    return db_user


def get_updatable_recipe(
    principal: schemas.Principal = Depends(get_current_principal),
    db_recipe: models.Recipe = Depends(load_recipe),
) -> models.Recipe:
    authorize(principal, db_recipe.owner_id, "update this recipe")
    return db_recipe


def get_deletable_recipe(
    principal: schemas.Principal = Depends(get_current_principal),
    db_recipe: models.Recipe = Depends(load_recipe),
) -> models.Recipe:
    authorize(principal, db_recipe.owner_id, "delete this recipe")
    return db_recipe


def get_deletable_comment(
    recipe_id: UUID,
    principal: schemas.Principal = Depends(get_current_principal),
    db_comment: models.Comment = Depends(load_comment),
) -> models.Comment:
    """
    A comment is only reachable through its own recipe's URL, even for its author.
    """
    if db_comment.recipe_id != recipe_id:
        logger.warning(f"Comment {db_comment.id} does not belong to recipe {recipe_id}")
        raise BadRequest("Comment does not belong to the specified recipe")
    authorize(principal, db_comment.author_id, "delete this comment")
    return db_comment
