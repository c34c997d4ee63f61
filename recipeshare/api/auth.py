# api/auth.py
# Handles user registration and login.

import logging
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

# Import local modules
from recipeshare import crud
from recipeshare import schemas
from recipeshare.core.config import settings
from recipeshare.core.exceptions import Conflict, NotFound, Unauthenticated
from recipeshare.core.rate_limit import limiter
from recipeshare.core.security import create_access_token, verify_password
from recipeshare.db.session import get_db

# Create an API router
router = APIRouter()

# Get a logger instance
logger = logging.getLogger(__name__)


@router.post("/register", response_model=schemas.Message, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def register(request: Request, user: schemas.UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user. Email and handle (after slugification) must both be unused.
    """
    if crud.get_user_by_email(db, email=user.email):
        logger.warning(f"Registration rejected, email in use: {user.email}")
        raise Conflict("Email already in use")

    handle_slug = crud.slugify_handle(user.handle)
    if crud.get_user_by_handle(db, handle=handle_slug):
        logger.warning(f"Registration rejected, handle in use: {handle_slug}")
        raise Conflict("Handle already in use")

    new_user = crud.create_user(db, user)
    logger.info(f"Registered user {new_user.id} (@{new_user.handle})")
    return {"message": "User registered successfully"}


@router.post("/login", response_model=schemas.Token)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def login(request: Request, credentials: schemas.LoginRequest, db: Session = Depends(get_db)):
    """
    Log in with email and password and get a bearer token.
    """
    user = crud.get_user_by_email(db, email=credentials.email)
    if user is None:
        logger.warning(f"Login for unknown email {credentials.email}")
        raise NotFound("User")

    if not verify_password(credentials.password, user.hashed_password):
        logger.warning("Incorrect password")
        raise Unauthenticated("Invalid password")

    access_token = create_access_token(
        user.id, claims={"handle": user.handle, "email": user.email}
    )
    return {"access_token": access_token, "token_type": "bearer"}
