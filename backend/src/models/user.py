"""
User model representing clinic staff who sign in to the application.

Users are the principals behind every request: physicians, nurses and
registrars. Their names feed the actor fallbacks used when a consultation
does not name its physician explicitly.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class User(Base):
    """Clinic staff member allowed to create clinical records."""

    __tablename__ = "usuarios"

    id_usuario: Mapped[str] = mapped_column(String(36), primary_key=True)
    """Unique identifier (UUID) of the user."""

    nombres: Mapped[str] = mapped_column(String(255))
    """Given names."""

    apellidos: Mapped[str] = mapped_column(String(255))
    """Family names."""

    correo: Mapped[str] = mapped_column(String(255), unique=True)
    """Login e-mail, unique across users."""

    rol: Mapped[str] = mapped_column(String(50), default="medico")
    """Role: 'medico', 'enfermera', 'administrador' or 'recepcion'."""

    activo: Mapped[bool] = mapped_column(Boolean, default=True)
    """Inactive users are rejected by the identity verifier."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    """Timestamp when the user was created."""
