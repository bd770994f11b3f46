import fcntl
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config

from leaguify.config import config
from leaguify.utils.logging import logger

_MIGRATION_LOCK_PATH = "/tmp/leaguify-alembic.lock"
_ALEMBIC_INI_PATH = Path(__file__).resolve().parents[2] / "alembic.ini"


@contextmanager
def _migration_lock() -> Iterator[None]:
    with open(_MIGRATION_LOCK_PATH, "w", encoding="utf-8") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def get_alembic_config(dsn: str | None = None) -> Config:
    alembic_config = Config(str(_ALEMBIC_INI_PATH))
    alembic_config.set_main_option("script_location", str(_ALEMBIC_INI_PATH.parent / "alembic"))
    alembic_config.set_main_option("sqlalchemy.url", dsn if dsn is not None else config.pg_dsn)
    return alembic_config


def alembic_run_migrations(dsn: str | None = None) -> None:
    with _migration_lock():
        logger.info("Running migrations")
        command.upgrade(get_alembic_config(dsn), "head")
