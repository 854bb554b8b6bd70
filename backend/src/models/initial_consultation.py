"""
Initial consultation model.

The first clinical visit of a patient: presenting symptom, history,
gyneco-obstetric counts, habits, diagnosis and treatment. Attached images
are kept as a JSON array of URLs in `imagenes`.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import String, Text, Integer, Date, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class InitialConsultation(Base):
    """Initial consultation recorded by a physician. Immutable once created."""

    __tablename__ = "consulta_inicial"

    id_consulta: Mapped[str] = mapped_column(String(36), primary_key=True)
    paciente_id: Mapped[str] = mapped_column(ForeignKey("pacientes.id_paciente"))
    medico_id: Mapped[str] = mapped_column(String(36))
    fecha_consulta: Mapped[date] = mapped_column(Date)
    medico: Mapped[str] = mapped_column(String(255))
    """Display name of the examining physician."""

    primer_sintoma: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    fecha_primer_sintoma: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    antecedentes_medicos: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    antecedentes_quirurgicos: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    revision_sistemas: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    menstruacion_menarca: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    menstruacion_ultima: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Counts default to 0 when absent or unparseable
    gravidez: Mapped[int] = mapped_column(Integer, default=0)
    partos: Mapped[int] = mapped_column(Integer, default=0)
    abortos: Mapped[int] = mapped_column(Integer, default=0)
    habitos_tabaco: Mapped[int] = mapped_column(Integer, default=0)

    habitos_otros: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    historia_familiar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    diagnostico: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tratamiento: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    usuario_registro: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    """Identifier of the authenticated user who recorded the consultation."""

    imagenes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    """JSON array of attachment URLs, or NULL when nothing was attached."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_consulta_inicial_paciente", "paciente_id"),
    )
