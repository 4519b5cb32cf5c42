# src/unmute_world/scripts/migrate.py
from __future__ import annotations

import os

from alembic import command
from alembic.config import Config

from unmute_world.core.settings import settings

# Source checkout layout; installed copies point ALEMBIC_CONFIG at their alembic.ini.
MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def alembic_ini_path() -> str:
    """Return the alembic.ini to use, honouring ``ALEMBIC_CONFIG``."""
    override = os.getenv("ALEMBIC_CONFIG")
    if override:
        return os.path.abspath(override)
    return os.path.join(MIGRATIONS_DIR, "alembic.ini")


def build_alembic_config() -> Config:
    """Return an Alembic config for the migrations folder holding alembic.ini."""
    ini_path = alembic_ini_path()
    if not os.path.isfile(ini_path):
        raise FileNotFoundError(
            f"Alembic config not found at {ini_path}; set ALEMBIC_CONFIG to the migrations/alembic.ini path"
        )
    cfg = Config(ini_path)
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)
    cfg.set_main_option("script_location", os.path.dirname(ini_path))
    return cfg


def run_upgrade_head() -> None:
    command.upgrade(build_alembic_config(), "head")


if __name__ == "__main__":
    run_upgrade_head()
