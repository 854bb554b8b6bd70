"""
Audit log model ("historial").

One row per create action. Rows are written after the audited change has
been committed, so a missing audit row never means a missing record.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, TIMESTAMP, Index
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class AuditLog(Base):
    """Audit trail entry for a change made by a user."""

    __tablename__ = "historial"

    id_historial: Mapped[str] = mapped_column(String(36), primary_key=True)
    usuario_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    tabla: Mapped[str] = mapped_column(String(100))
    """Name of the table the change applies to."""

    accion: Mapped[str] = mapped_column(String(20))
    descripcion: Mapped[str] = mapped_column(Text)

    datos_nuevos: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    """JSON snapshot of the submitted values."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    """When the action was recorded (fecha)."""

    __table_args__ = (
        Index("idx_historial_tabla", "tabla"),
        Index("idx_historial_usuario", "usuario_id"),
    )
