"""
Family reference model: the person responsible for a patient.
"""

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional

from core.database import Base


class FamilyReference(Base):
    __tablename__ = "referencia_familiar"

    id_referencia: Mapped[str] = mapped_column(String(36), primary_key=True)
    paciente_id: Mapped[str] = mapped_column(ForeignKey("pacientes.id_paciente"))
    nombre_referencia: Mapped[str] = mapped_column(String(255), default="")
    parentesco: Mapped[str] = mapped_column(String(50))
    telefono: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
