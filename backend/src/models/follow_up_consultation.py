"""
Follow-up consultation model.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import String, Text, Date, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class FollowUpConsultation(Base):
    """Follow-up visit: evolution narrative, notes and current treatment."""

    __tablename__ = "consulta_seguimiento"

    id_seguimiento: Mapped[str] = mapped_column(String(36), primary_key=True)
    paciente_id: Mapped[str] = mapped_column(ForeignKey("pacientes.id_paciente"))
    medico_id: Mapped[str] = mapped_column(String(36))
    fecha: Mapped[date] = mapped_column(Date)
    medico: Mapped[str] = mapped_column(String(255))
    evolucion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notas: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tratamiento_actual: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    usuario_registro: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    imagenes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    """JSON array of attachment URLs, or NULL when nothing was attached."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_consulta_seguimiento_paciente", "paciente_id"),
    )
