# main.py
# Main application file for the FastAPI recipe sharing service.

import logging.config
import os
from fastapi import FastAPI
import uvicorn

# Import the CORS middleware
from fastapi.middleware.cors import CORSMiddleware

# Rate limiting
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Import local modules
from recipeshare.db.session import engine
from recipeshare import models
from recipeshare.api import auth, users, recipes, comments
from recipeshare.core.config import settings
from recipeshare.core.exceptions import register_exception_handlers
from recipeshare.core.logging_middleware import StructuredLoggingMiddleware
from recipeshare.core.middleware import OriginAllowlistMiddleware, SecurityHeadersMiddleware
from recipeshare.core.rate_limit import limiter

# Load logging configuration
if os.path.exists("logging.ini"):
    logging.config.fileConfig("logging.ini", disable_existing_loggers=False)

# Get the logger instance
logger = logging.getLogger(__name__)


# Create all database tables if they don't exist.
models.Base.metadata.create_all(bind=engine)

# Initialize the FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for sharing recipes, with likes, favorites and comments.",
    version="1.0.0",
    root_path=settings.ROOT_PATH,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
)

# Add rate limiter to app state and register exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

register_exception_handlers(app)

# --- Add Structured Logging Middleware ---
app.add_middleware(StructuredLoggingMiddleware)
# --- End of Structured Logging Middleware ---

# --- Add CORS Middleware ---
# Origins loaded from settings

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],  # Explicit HTTP methods
    allow_headers=["Authorization", "Content-Type", "Accept"],  # Explicit headers
    expose_headers=["X-Total-Count"],  # Expose custom headers
)

# Unlisted origins are turned away before reaching CORS or the routes
app.add_middleware(OriginAllowlistMiddleware, allowed_origins=settings.allowed_origins)

# --- End of CORS Middleware Section ---

app.add_middleware(SecurityHeadersMiddleware)

# Include API routers
app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Authentication"])
app.include_router(users.router, prefix=f"{settings.API_PREFIX}/user", tags=["Users"])
app.include_router(recipes.router, prefix=f"{settings.API_PREFIX}/recipes", tags=["Recipes"])
app.include_router(comments.router, prefix=f"{settings.API_PREFIX}/recipes", tags=["Comments"])


@app.get("/", tags=["Root"])
async def read_root():
    """
    Root endpoint to check if the API is running.
    """
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the Recipe Share API!"}


if __name__ == "__main__":
    # This block allows running the app directly with uvicorn for development.
    uvicorn.run("recipeshare.main:app", host="0.0.0.0", port=8000, reload=True)
