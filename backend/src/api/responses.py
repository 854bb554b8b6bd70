"""
Shared response models for API endpoints.

This module contains Pydantic response models that are shared across
multiple API endpoints to ensure consistency and reduce duplication.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class PatientResponse(BaseModel):
    """Response model for a stored patient row."""
    model_config = ConfigDict(from_attributes=True)

    id_paciente: str
    nombres: str
    apellidos: str
    numero_registro_medico: str
    dpi: Optional[str] = None
    edad: int
    sexo: str
    telefono: Optional[str] = None
    correo_electronico: Optional[str] = None
    direccion: Optional[str] = None
    fecha_nacimiento: Optional[date] = None  # Serialized as YYYY-MM-DD
    lugar_nacimiento: Optional[str] = None
    estado_civil: Optional[str] = None
    ocupacion: Optional[str] = None
    raza: Optional[str] = None
    conyuge: Optional[str] = None
    padre_madre: Optional[str] = None
    lugar_trabajo: Optional[str] = None
    nombre_responsable: Optional[str] = None
    telefono_responsable: Optional[str] = None
    usuario_registro: Optional[str] = None
    fecha_registro: Optional[datetime] = None
    created_at: datetime


class PatientCreateResponse(BaseModel):
    """Response model for patient registration."""
    message: str
    paciente: PatientResponse


class PatientDetailResponse(BaseModel):
    """Response model for a single patient lookup."""
    paciente: PatientResponse


class PatientListResponse(BaseModel):
    """Response model for listing patients."""
    pacientes: List[PatientResponse]


class InitialConsultationCreateResponse(BaseModel):
    """Response model for initial consultation creation."""
    id_consulta: str
    id: str  # Same value as id_consulta
    message: str


class FollowUpCreateResponse(BaseModel):
    """Response model for follow-up consultation creation."""
    id_seguimiento: str
    message: str


class AssessmentCreateResponse(BaseModel):
    """Response model for assessment creation."""
    id_valoracion: str
    message: str
