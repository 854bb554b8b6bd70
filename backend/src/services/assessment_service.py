"""
Vital-sign assessment service.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from auth.dependencies import UserContext
from models import Assessment
from services.audit_service import AuditService
from services.intake_service import new_record_id, require_fields, resolve_actor_id, text_or_none
from utils.datetime_utils import parse_datetime_string

logger = logging.getLogger(__name__)


class AssessmentService:
    """Service class for vital-sign assessments."""

    @staticmethod
    def create_assessment(
        db: Session,
        principal: Optional[UserContext],
        paciente_id: Optional[str],
        enfermera_id: Optional[str] = None,
        fecha_valoracion: Optional[str] = None,
        peso: Optional[float] = None,
        talla: Optional[float] = None,
        pulso: Optional[float] = None,
        respiracion: Optional[float] = None,
        presion_arterial: Optional[str] = None,
        temperatura: Optional[float] = None,
    ) -> Assessment:
        """
        Create a vital-sign assessment.

        The recording nurse falls back to the authenticated user. Every
        measurement left out is stored as NULL.

        Raises:
            MissingFieldsError: If the patient or the nurse cannot be resolved
            ValueError: If fecha_valoracion is not ISO-8601
        """
        final_enfermera_id = resolve_actor_id(enfermera_id, principal)

        require_fields(
            {"paciente_id": paciente_id, "enfermera_id": final_enfermera_id},
            context="assessment",
        )

        fecha = text_or_none(fecha_valoracion)

        assessment = Assessment(
            id_valoracion=new_record_id(),
            paciente_id=paciente_id,
            enfermera_id=final_enfermera_id,
            fecha_valoracion=parse_datetime_string(fecha) if fecha else None,
            peso=peso,
            talla=talla,
            pulso=pulso,
            respiracion=respiracion,
            presion_arterial=text_or_none(presion_arterial),
            temperatura=temperatura,
            usuario_registro=principal.user_id if principal else None,
        )
        db.add(assessment)
        db.commit()
        logger.info(f"Created assessment {assessment.id_valoracion} for patient {paciente_id}")

        AuditService.log_create(
            db,
            user_id=principal.user_id if principal else None,
            table=Assessment.__tablename__,
            description=f"Nueva valoración para paciente {paciente_id}",
            new_data={"id_valoracion": assessment.id_valoracion, "paciente_id": paciente_id},
        )
        return assessment
