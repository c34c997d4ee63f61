# models.py
# Defines the SQLAlchemy ORM models for the database tables.

import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Column, ForeignKey, Integer, String, Text, Table, DateTime, JSON
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import Uuid
from recipeshare.db.session import Base


def _utcnow():
    # Naive UTC with microseconds; keeps newest-first ordering stable
    return datetime.now(timezone.utc).replace(tzinfo=None)


# Membership sets. The composite primary key keeps each principal in a set at
# most once, so adding is a single insert and a duplicate is rejected by the store.
recipe_likes = Table(
    "recipe_likes",
    Base.metadata,
    Column("recipe_id", Uuid(as_uuid=True), ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

recipe_favorites = Table(
    "recipe_favorites",
    Base.metadata,
    Column("recipe_id", Uuid(as_uuid=True), ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """
    User model for the 'users' table.
    """
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    handle = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    recipes = relationship("Recipe", back_populates="owner", order_by="Recipe.created_at")
    favorites = relationship("Recipe", secondary=recipe_favorites, back_populates="favorited_by")
    comments = relationship("Comment", back_populates="author")

    def __str__(self):
        return f"{self.id}: @{self.handle}"


class Recipe(Base):
    """
    Recipe model for the 'recipes' table.
    Ingredients and instructions are ordered lists of strings kept as JSON.
    """
    __tablename__ = "recipes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)

    title = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=False)
    ingredients = Column(JSON, nullable=False, default=list)
    instructions = Column(JSON, nullable=False, default=list)
    category = Column(String, index=True, nullable=False)
    image = Column(String, nullable=True)

    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), index=True, nullable=False)

    # Audit
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
    version = Column(Integer, default=1)
    checksum = Column(String, nullable=True)

    # Relationships
    owner = relationship("User", back_populates="recipes")
    liked_by = relationship("User", secondary=recipe_likes)
    favorited_by = relationship("User", secondary=recipe_favorites, back_populates="favorites")
    comments = relationship("Comment", back_populates="recipe", cascade="all, delete-orphan")

    def __str__(self):
        return f"{self.id}: {self.title}"


class Comment(Base):
    """
    A comment left on a recipe.
    """
    __tablename__ = "comments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    text = Column(Text, nullable=False)
    recipe_id = Column(Uuid(as_uuid=True), ForeignKey("recipes.id"), index=True, nullable=False)
    author_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    recipe = relationship("Recipe", back_populates="comments")
    author = relationship("User", back_populates="comments")
