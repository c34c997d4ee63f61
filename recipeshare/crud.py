# crud.py
# Contains the functions for Create, Read, Update, Delete (CRUD) operations.

import logging
from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from uuid import UUID

from recipeshare import models
from recipeshare import schemas
from recipeshare.core.exceptions import Conflict
from recipeshare.core.hashing import calculate_recipe_checksum, recipe_content
from recipeshare.core.slug import slugify_handle
from recipeshare.core.security import get_password_hash

# Get a logger instance
logger = logging.getLogger(__name__)


# --- User CRUD Functions ---
def get_user(db: Session, user_id: UUID):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(models.User).filter(func.lower(models.User.email) == email.lower()).first()


def get_user_by_handle(db: Session, handle: str):
    return db.query(models.User).filter(models.User.handle == handle).first()


def create_user(db: Session, user: schemas.UserCreate):
    """
    Persists a new user. The handle is stored slugified and the password hashed.
    A unique-constraint failure (a registration racing this one) becomes a Conflict.
    """
    db_user = models.User(
        handle=slugify_handle(user.handle),
        # Display name defaults to the handle as submitted
        name=user.name or user.handle,
        email=user.email.lower(),
        hashed_password=get_password_hash(user.password),
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Unique constraint rejected registration for {user.email}")
        raise Conflict("Handle or email already in use")
    db.refresh(db_user)
    return db_user


def update_user(db: Session, db_user: models.User, user_update: schemas.UserUpdate):
    db_user.handle = slugify_handle(user_update.handle)
    db_user.name = user_update.name
    db_user.email = user_update.email.lower()
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Handle or email already in use")
    db.refresh(db_user)
    return db_user


# --- Recipe CRUD Functions ---
def get_recipe(db: Session, recipe_id: UUID):
    """
    Retrieve a single recipe with its membership sets loaded.
    """
    logger.debug(f"Retrieving recipe with id {recipe_id}")
    return (
        db.query(models.Recipe)
        .options(
            selectinload(models.Recipe.liked_by),
            selectinload(models.Recipe.favorited_by),
        )
        .filter(models.Recipe.id == recipe_id)
        .first()
    )


def get_recipes(db: Session, skip: int = 0, limit: int = 100):
    """
    Retrieve a page of recipes, oldest first, plus the total count.
    """
    logger.debug(f"Retrieving all recipes skipping {skip}, up to limit {limit}")
    query = db.query(models.Recipe)
    total_count = query.count()
    recipes = (
        query.options(
            selectinload(models.Recipe.liked_by),
            selectinload(models.Recipe.favorited_by),
        )
        .order_by(models.Recipe.created_at)
        .offset(skip)
        .limit(limit)
        .all()
    )
    return recipes, total_count


def create_user_recipe(db: Session, recipe: schemas.RecipeCreate, user_id: UUID):
    """
    Create a new recipe owned by user_id. Ownership lives on the recipe row,
    so this is a single write.
    """
    logger.debug(f"Creating recipe: {recipe}")
    recipe_data = recipe.model_dump()
    db_recipe = models.Recipe(
        **recipe_data,
        owner_id=user_id,
        checksum=calculate_recipe_checksum(recipe_data),
        version=1,
    )
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def recipe_has_changes(db_recipe: models.Recipe, recipe_update: schemas.RecipeCreate) -> bool:
    """
    Deep comparison of the validated payload against the stored content.
    Values are compared after validation (trimmed strings), and list order matters.
    """
    incoming = recipe_update.model_dump()
    if db_recipe.checksum:
        return db_recipe.checksum != calculate_recipe_checksum(incoming)
    return recipe_content(db_recipe) != recipe_content(incoming)


def update_recipe(db: Session, db_recipe: models.Recipe, recipe_update: schemas.RecipeCreate):
    """
    Replace the content of an existing recipe and bump its version.
    Callers check recipe_has_changes first; this always writes.
    """
    logger.debug(f"Updating recipe {db_recipe.id} with: {recipe_update}")
    update_data = recipe_update.model_dump()
    for key, value in update_data.items():
        setattr(db_recipe, key, value)
    db_recipe.checksum = calculate_recipe_checksum(update_data)
    db_recipe.version = (db_recipe.version or 1) + 1

    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def delete_recipe(db: Session, db_recipe: models.Recipe):
    """
    Delete a recipe. Comments go with it through the cascade, and the
    membership rows through the secondary relationships.
    """
    logger.debug(f"Deleting recipe {db_recipe.id}")
    db.delete(db_recipe)
    db.commit()
    return db_recipe


def get_user_favorites(db: Session, user_id: UUID):
    return (
        db.query(models.Recipe)
        .join(models.recipe_favorites, models.recipe_favorites.c.recipe_id == models.Recipe.id)
        .filter(models.recipe_favorites.c.user_id == user_id)
        .order_by(models.Recipe.created_at)
        .all()
    )


# --- Membership Sets (likes / favorites) ---

def _count_members(db: Session, table, recipe_id: UUID) -> int:
    return db.scalar(
        select(func.count()).select_from(table).where(table.c.recipe_id == recipe_id)
    )


def add_member(db: Session, table, recipe_id: UUID, user_id: UUID) -> int:
    """
    Adds user_id to a recipe's membership set and returns the new size.
    The insert is atomic; a duplicate key means the user is already a member,
    which is a no-op.
    """
    try:
        db.execute(insert(table).values(recipe_id=recipe_id, user_id=user_id))
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.debug(f"User {user_id} already in {table.name} for recipe {recipe_id}")
    return _count_members(db, table, recipe_id)


def remove_member(db: Session, table, recipe_id: UUID, user_id: UUID) -> int:
    """
    Removes user_id from a recipe's membership set and returns the new size.
    Removing a non-member is a no-op.
    """
    db.execute(
        delete(table).where(table.c.recipe_id == recipe_id, table.c.user_id == user_id)
    )
    db.commit()
    return _count_members(db, table, recipe_id)


# --- Comment CRUD Functions ---

def get_comment(db: Session, comment_id: UUID):
    return db.query(models.Comment).filter(models.Comment.id == comment_id).first()


def get_comments(db: Session, recipe_id: UUID, skip: int = 0, limit: int = 100):
    """
    Comments on a recipe, newest first, with their authors loaded.
    """
    return (
        db.query(models.Comment)
        .options(selectinload(models.Comment.author))
        .filter(models.Comment.recipe_id == recipe_id)
        .order_by(models.Comment.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def create_comment(db: Session, comment: schemas.CommentCreate, user_id: UUID, recipe_id: UUID):
    db_comment = models.Comment(text=comment.text, recipe_id=recipe_id, author_id=user_id)
    db.add(db_comment)
    db.commit()
    db.refresh(db_comment)
    return db_comment


def delete_comment(db: Session, db_comment: models.Comment):
    db.delete(db_comment)
    db.commit()
