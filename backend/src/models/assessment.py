"""
Vital-sign assessment model.

`fecha_valoracion` is supplied by the nurse and tells when the vitals were
taken; `created_at` is when the row was written. Every measurement is
independently nullable.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, Float, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class Assessment(Base):
    """Vital signs recorded by a nurse or clinician."""

    __tablename__ = "valoracion"

    id_valoracion: Mapped[str] = mapped_column(String(36), primary_key=True)
    paciente_id: Mapped[str] = mapped_column(ForeignKey("pacientes.id_paciente"))
    enfermera_id: Mapped[str] = mapped_column(String(36))
    fecha_valoracion: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)

    peso: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    """Weight in pounds."""

    talla: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    """Height in centimetres."""

    pulso: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    respiracion: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    presion_arterial: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    """Blood pressure as written by staff, e.g. "120/80"."""

    temperatura: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    usuario_registro: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    """Row creation timestamp (fecha_registro)."""

    __table_args__ = (
        Index("idx_valoracion_paciente", "paciente_id"),
    )
