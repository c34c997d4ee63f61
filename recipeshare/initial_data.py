import argparse
import logging
from sqlalchemy.orm import Session

from recipeshare import models
from recipeshare.db.session import Base, SessionLocal, engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def init_db() -> None:
    logger.info("Creating tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables ready.")


def clear_db(db: Session) -> None:
    """
    Deletes every row, children before parents.
    """
    logger.info("Clearing all data...")
    db.query(models.Comment).delete()
    db.execute(models.recipe_likes.delete())
    db.execute(models.recipe_favorites.delete())
    db.query(models.Recipe).delete()
    db.query(models.User).delete()
    db.commit()
    logger.info("All data cleared.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Prepare or clear the recipe database")
    parser.add_argument("--clear", action="store_true", help="Delete all users, recipes and comments")
    args = parser.parse_args()

    init_db()
    if args.clear:
        db = SessionLocal()
        try:
            clear_db(db)
        finally:
            db.close()


if __name__ == "__main__":
    main()
