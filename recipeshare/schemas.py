# schemas.py
# Defines the Pydantic models (schemas) for data validation and serialization.

from pydantic import (
    BaseModel, EmailStr, ConfigDict, Field, ModelWrapValidatorHandler, StringConstraints,
    ValidationError, field_validator, model_validator,
)
from pydantic_core import PydanticCustomError
from typing import Annotated, List, Optional, Any
from uuid import UUID
from datetime import datetime

from recipeshare.core.slug import slugify_handle

# --- Basic Types ---

# Surrounding whitespace is trimmed before the emptiness check
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# --- Principal ---

class Principal(BaseModel):
    """
    The authenticated caller, as resolved from a bearer token.
    """
    id: UUID
    handle: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(frozen=True)


# --- User Schemas ---

class UserBase(BaseModel):
    handle: NonEmptyStr
    name: NonEmptyStr
    email: EmailStr

    @field_validator("handle")
    @classmethod
    def handle_has_slug(cls, v: str) -> str:
        # "!!!" or a non-Latin handle would be stored as an empty slug
        if not slugify_handle(v):
            raise ValueError("Handle is required")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


class UserCreate(UserBase):
    name: Optional[NonEmptyStr] = None
    password: str = Field(min_length=8)
    confirm_password: NonEmptyStr = Field(alias="confirmPassword")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="wrap")
    @classmethod
    def passwords_match(cls, data: Any, handler: ModelWrapValidatorHandler["UserCreate"]) -> "UserCreate":
        """
        The confirmation is compared against the raw input, so a mismatch is
        reported alongside any other field errors, including a too-short password.
        """
        mismatch = None
        if isinstance(data, dict):
            password = data.get("password")
            confirm = data.get("confirmPassword", data.get("confirm_password"))
            if isinstance(password, str) and isinstance(confirm, str) and confirm.strip():
                if password != confirm.strip():
                    mismatch = {
                        "type": PydanticCustomError("password_mismatch", "Passwords do not match"),
                        "loc": ("confirmPassword",),
                        "input": confirm,
                    }

        try:
            user = handler(data)
        except ValidationError as exc:
            if mismatch is None:
                raise
            line_errors = [
                {
                    "type": PydanticCustomError(err["type"], err["msg"], err.get("ctx")),
                    "loc": err["loc"],
                    "input": err["input"],
                }
                for err in exc.errors(include_url=False)
            ]
            raise ValidationError.from_exception_data(cls.__name__, line_errors + [mismatch])

        if mismatch is not None:
            raise ValidationError.from_exception_data(cls.__name__, [mismatch])
        return user


class UserUpdate(UserBase):
    pass


class UserPublic(BaseModel):
    id: UUID
    handle: str
    name: str
    email: str
    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    email: EmailStr
    password: NonEmptyStr

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()


# --- Token Schemas ---

class Token(BaseModel):
    access_token: str
    token_type: str


# --- Recipe Schemas ---

class RecipeBase(BaseModel):
    title: NonEmptyStr
    description: NonEmptyStr
    ingredients: List[NonEmptyStr] = Field(min_length=1)
    instructions: List[NonEmptyStr] = Field(min_length=1)
    category: NonEmptyStr
    image: Optional[str] = None


class RecipeCreate(RecipeBase):
    pass


class Recipe(RecipeBase):
    id: UUID
    author: UUID
    likes: List[UUID] = []
    favorites: List[UUID] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: Optional[int] = None

    @model_validator(mode='before')
    @classmethod
    def transform_from_orm(cls, data: Any) -> Any:
        if hasattr(data, "owner_id"):  # Is an ORM object
            return {
                "id": data.id,
                "title": data.title,
                "description": data.description,
                "ingredients": data.ingredients or [],
                "instructions": data.instructions or [],
                "category": data.category,
                "image": data.image,
                "author": data.owner_id,
                "likes": [user.id for user in data.liked_by],
                "favorites": [user.id for user in data.favorited_by],
                "created_at": data.created_at,
                "updated_at": data.updated_at,
                "version": data.version,
            }
        return data

    model_config = ConfigDict(from_attributes=True)


class RecipeUpdateResult(BaseModel):
    message: str
    changed: bool
    recipe: Recipe


class LikeCount(BaseModel):
    likes: int


class FavoriteCount(BaseModel):
    favorites: int


# --- Comment Schemas ---

class CommentCreate(BaseModel):
    text: NonEmptyStr


class CommentAuthor(BaseModel):
    id: UUID
    handle: str
    model_config = ConfigDict(from_attributes=True)


class Comment(BaseModel):
    id: UUID
    recipe: UUID
    author: CommentAuthor
    text: str
    created_at: Optional[datetime] = None

    @model_validator(mode='before')
    @classmethod
    def transform_from_orm(cls, data: Any) -> Any:
        if hasattr(data, "recipe_id"):  # Is an ORM object
            return {
                "id": data.id,
                "recipe": data.recipe_id,
                "author": {"id": data.author.id, "handle": data.author.handle},
                "text": data.text,
                "created_at": data.created_at,
            }
        return data

    model_config = ConfigDict(from_attributes=True)


# --- Generic ---

class Message(BaseModel):
    message: str
