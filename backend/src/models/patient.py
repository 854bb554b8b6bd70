"""
Patient model representing individuals registered at the clinic.

A patient row is created once by a registrar. Its age is computed from the
birth date at registration time and stored; it is not kept up to date.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import String, Text, Integer, Date, TIMESTAMP, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class Patient(Base):
    """
    Patient entity holding demographic and contact information.

    `numero_registro_medico` is unique across all patients; the database
    constraint is the authoritative guard against duplicates, the service
    level check only improves the error message.
    """

    __tablename__ = "pacientes"

    id_paciente: Mapped[str] = mapped_column(String(36), primary_key=True)
    """Unique identifier (UUID) for the patient."""

    nombres: Mapped[str] = mapped_column(String(255))
    apellidos: Mapped[str] = mapped_column(String(255))

    numero_registro_medico: Mapped[str] = mapped_column(String(50), nullable=False)
    """Medical record number ("número de expediente"), unique per patient."""

    dpi: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    """National identity document number."""

    edad: Mapped[int] = mapped_column(Integer, default=0)
    """Age in years at registration time."""

    sexo: Mapped[str] = mapped_column(String(20))
    telefono: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    correo_electronico: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    direccion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    fecha_nacimiento: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    """Birth date (date only). Null when the supplied value could not be parsed."""

    lugar_nacimiento: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    estado_civil: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    ocupacion: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    raza: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    conyuge: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    padre_madre: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    lugar_trabajo: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    nombre_responsable: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    telefono_responsable: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    usuario_registro: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    """Identifier of the user who registered the patient."""

    fecha_registro: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    """Registration timestamp."""

    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("numero_registro_medico", name="uq_pacientes_numero_registro_medico"),
        Index("idx_pacientes_created_at", "created_at"),
        Index("idx_pacientes_dpi", "dpi"),
    )
