# pyright: reportMissingTypeStubs=false
"""
Patient API endpoints.

Registration, search and lookup of patients.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from api.responses import (
    PatientCreateResponse,
    PatientDetailResponse,
    PatientListResponse,
    PatientResponse,
)
from auth.dependencies import UserContext, require_authenticated
from core.database import get_db
from services.patient_service import PatientCreateInput, PatientService

logger = logging.getLogger(__name__)

router = APIRouter()


class PatientCreateRequest(BaseModel):
    """Request model for registering a patient (camelCase keys)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    nombres: Optional[str] = None
    apellidos: Optional[str] = None
    dpi: Optional[str] = None
    numero_expediente: Optional[str] = None
    fecha_nacimiento: Optional[str] = None
    sexo: Optional[str] = None
    telefono: Optional[str] = None
    correo_electronico: Optional[str] = None
    direccion: Optional[str] = None
    lugar_nacimiento: Optional[str] = None
    estado_civil: Optional[str] = None
    ocupacion: Optional[str] = None
    raza: Optional[str] = None
    conyuge: Optional[str] = None
    padre_madre: Optional[str] = None
    lugar_trabajo: Optional[str] = None
    nombre_responsable: Optional[str] = None
    telefono_responsable: Optional[str] = None


@router.get("", summary="List or search patients", response_model=PatientListResponse)
async def list_patients(
    search: Optional[str] = Query(None, description="Substring of names, DPI or record number"),
    current_user: UserContext = Depends(require_authenticated),
    db: Session = Depends(get_db),
) -> PatientListResponse:
    """List the 50 most recently registered patients matching `search`."""
    patients = PatientService.list_patients(db, search)
    return PatientListResponse(
        pacientes=[PatientResponse.model_validate(p) for p in patients]
    )


@router.post(
    "",
    summary="Register a patient",
    status_code=status.HTTP_201_CREATED,
    response_model=PatientCreateResponse,
)
async def create_patient(
    request: PatientCreateRequest,
    current_user: UserContext = Depends(require_authenticated),
    db: Session = Depends(get_db),
) -> PatientCreateResponse:
    """
    Register a new patient.

    Also creates the patient's record folder and, when a responsible party
    is given, a family reference.
    """
    patient = PatientService.create_patient(
        db=db,
        principal=current_user,
        data=PatientCreateInput(**request.model_dump()),
    )

    return PatientCreateResponse(
        message="Paciente registrado exitosamente",
        paciente=PatientResponse.model_validate(patient),
    )


@router.get("/{id_paciente}", summary="Get a patient", response_model=PatientDetailResponse)
async def get_patient(
    id_paciente: str,
    current_user: UserContext = Depends(require_authenticated),
    db: Session = Depends(get_db),
) -> PatientDetailResponse:
    """Get a single patient by id."""
    patient = PatientService.get_patient(db, id_paciente)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Paciente no encontrado"
        )

    return PatientDetailResponse(paciente=PatientResponse.model_validate(patient))
