# pyright: reportMissingTypeStubs=false
"""
Vital-sign assessment API endpoints.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from api.responses import AssessmentCreateResponse
from auth.dependencies import UserContext, require_authenticated
from core.database import get_db
from services.assessment_service import AssessmentService

logger = logging.getLogger(__name__)

router = APIRouter()


class AssessmentCreateRequest(BaseModel):
    """Request model for creating an assessment. Every field may be omitted."""
    paciente_id: Optional[str] = None
    enfermera_id: Optional[str] = None
    fecha_valoracion: Optional[str] = None
    peso: Optional[float] = None
    talla: Optional[float] = None
    pulso: Optional[float] = None
    respiracion: Optional[float] = None
    presion_arterial: Optional[str] = None
    temperatura: Optional[float] = None

    @field_validator("peso", "talla", "pulso", "respiracion", "temperatura", mode="before")
    @classmethod
    def blank_measurement_as_none(cls, v: Any) -> Any:
        # Forms post untouched number inputs as ""
        if isinstance(v, str) and not v.strip():
            return None
        return v


@router.post(
    "",
    summary="Create a vital-sign assessment",
    status_code=status.HTTP_201_CREATED,
    response_model=AssessmentCreateResponse,
)
async def create_assessment(
    request: AssessmentCreateRequest,
    current_user: UserContext = Depends(require_authenticated),
    db: Session = Depends(get_db),
) -> AssessmentCreateResponse:
    """
    Record vital signs for a patient.

    `enfermera_id` defaults to the authenticated user; measurements left out
    are stored as null.
    """
    assessment = AssessmentService.create_assessment(
        db=db,
        principal=current_user,
        paciente_id=request.paciente_id,
        enfermera_id=request.enfermera_id,
        fecha_valoracion=request.fecha_valoracion,
        peso=request.peso,
        talla=request.talla,
        pulso=request.pulso,
        respiracion=request.respiracion,
        presion_arterial=request.presion_arterial,
        temperatura=request.temperatura,
    )

    return AssessmentCreateResponse(
        id_valoracion=assessment.id_valoracion,
        message="Valoración creada exitosamente",
    )
