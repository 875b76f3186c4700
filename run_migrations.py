"""Apply Alembic migrations up to head against settings.DATABASE_URL."""
from pathlib import Path

from alembic import command
from alembic.config import Config

from app.core.logging import configure_logging


def main() -> None:
    configure_logging()
    cfg = Config(str(Path(__file__).parent / "alembic.ini"))
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    main()
