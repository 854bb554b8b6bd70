"""initial_schema_baseline

Revision ID: 3b1f6c2a9d47
Revises: 
Create Date: 2026-10-19 10:12:31.204117

Baseline migration creating the record intake schema: usuarios, pacientes,
consulta_inicial, consulta_seguimiento, valoracion, referencia_familiar,
expediente and historial.
"""
from typing import Sequence, Union
import sys
import os

# Add src directory to path to import models
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from alembic import op

# Import all models to ensure they're registered with Base.metadata
from core.database import Base
import models  # noqa: F401


# revision identifiers, used by Alembic.
revision: str = '3b1f6c2a9d47'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create all database tables from SQLAlchemy models.

    Includes the unique constraint on pacientes.numero_registro_medico, which
    is what actually prevents two patients from sharing a record number.
    """
    Base.metadata.create_all(bind=op.get_bind())


def downgrade() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=op.get_bind())
