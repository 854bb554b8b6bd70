"""
Record folder ("expediente") model, opened when a patient is registered.
"""

from datetime import date
from typing import Optional

from sqlalchemy import String, Date, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from core.database import Base


class RecordFolder(Base):
    __tablename__ = "expediente"

    id_expediente: Mapped[str] = mapped_column(String(36), primary_key=True)
    paciente_id: Mapped[str] = mapped_column(ForeignKey("pacientes.id_paciente"))
    fecha_creacion: Mapped[date] = mapped_column(Date)
    usuario_creacion: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
