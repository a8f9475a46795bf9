"""Initialize database tables."""
import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

# Imported for their side effect of registering the tables
from todo_api.models.task import Task  # noqa: F401
from todo_api.models.user import User  # noqa: F401
from todo_api.db.config import engine as default_engine

logger = logging.getLogger(__name__)


def init_db(engine: Engine = default_engine) -> None:
    """Create the tasks and users collections if they do not exist yet."""
    logger.info("Creating all tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("Tables created successfully.")


if __name__ == "__main__":
    init_db()
