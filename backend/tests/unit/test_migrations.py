"""
Tests for the Alembic migration chain.

Runs every migration against a throwaway SQLite file and checks the schema
the application relies on.
"""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect


BACKEND_DIR = Path(__file__).resolve().parents[2]

EXPECTED_TABLES = {
    "usuarios",
    "pacientes",
    "consulta_inicial",
    "consulta_seguimiento",
    "valoracion",
    "referencia_familiar",
    "expediente",
    "historial",
}


def _alembic_config(database_url: str) -> Config:
    # No ini file: keeps alembic from reconfiguring the test run's logging
    config = Config()
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


def test_upgrade_creates_schema(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'migraciones.db'}"

    command.upgrade(_alembic_config(database_url), "head")

    inspector = inspect(create_engine(database_url))
    assert EXPECTED_TABLES <= set(inspector.get_table_names())

    unique_columns = [
        constraint["column_names"] for constraint in inspector.get_unique_constraints("pacientes")
    ]
    assert ["numero_registro_medico"] in unique_columns


def test_downgrade_drops_schema(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'migraciones.db'}"
    config = _alembic_config(database_url)

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    tables = set(inspect(create_engine(database_url)).get_table_names())
    assert not (EXPECTED_TABLES & tables)
