"""
Consultation service: initial and follow-up consultations.

Both kinds share the same flow: resolve the physician, check required
fields, ingest attached images into a kind-specific folder, then insert one
row. The insert is not wrapped with the uploads, so a failed insert can leave
uploaded images without a row referencing them.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from auth.dependencies import UserContext
from core.constants import FOLLOW_UP_CONSULTATION_FOLDER, INITIAL_CONSULTATION_FOLDER
from models import FollowUpConsultation, InitialConsultation
from services.audit_service import AuditService
from services.intake_service import (
    ImageUpload,
    ingest_images,
    int_or_zero,
    new_record_id,
    require_fields,
    resolve_actor_id,
    resolve_actor_name,
    text_or_none,
)
from utils.datetime_utils import parse_date_string
from utils.file_storage import ObjectStorage

logger = logging.getLogger(__name__)


@dataclass
class InitialConsultationInput:
    """Raw form fields of an initial consultation."""
    paciente_id: Optional[str] = None
    medico_id: Optional[str] = None
    fecha_consulta: Optional[str] = None
    medico: Optional[str] = None
    primer_sintoma: Optional[str] = None
    fecha_primer_sintoma: Optional[str] = None
    antecedentes_medicos: Optional[str] = None
    antecedentes_quirurgicos: Optional[str] = None
    revision_sistemas: Optional[str] = None
    menstruacion_menarca: Optional[str] = None
    menstruacion_ultima: Optional[str] = None
    gravidez: Optional[str] = None
    partos: Optional[str] = None
    abortos: Optional[str] = None
    habitos_tabaco: Optional[str] = None
    habitos_otros: Optional[str] = None
    historia_familiar: Optional[str] = None
    diagnostico: Optional[str] = None
    tratamiento: Optional[str] = None


@dataclass
class FollowUpInput:
    """Raw form fields of a follow-up consultation."""
    paciente_id: Optional[str] = None
    medico_id: Optional[str] = None
    fecha: Optional[str] = None
    medico: Optional[str] = None
    evolucion: Optional[str] = None
    notas: Optional[str] = None
    tratamiento_actual: Optional[str] = None


def _optional_date(value: Optional[str]):
    value = text_or_none(value)
    return parse_date_string(value) if value else None


class ConsultationService:
    """Service class for consultation records."""

    @staticmethod
    def create_initial_consultation(
        db: Session,
        storage: ObjectStorage,
        principal: Optional[UserContext],
        data: InitialConsultationInput,
        images: Sequence[Optional[ImageUpload]] = (),
    ) -> InitialConsultation:
        """
        Create an initial consultation.

        Args:
            db: Database session
            storage: Object storage receiving the attached images
            principal: Authenticated user, used for the physician fallbacks
            data: Submitted form fields
            images: Attachments by index; None marks an absent index

        Returns:
            Created InitialConsultation

        Raises:
            MissingFieldsError: If required fields are missing
            AttachmentRejectedError: If an image has a bad type or size
            AttachmentUploadError: If the object store fails
            ValueError: If a date field is malformed
        """
        medico_id = resolve_actor_id(data.medico_id, principal)
        medico = resolve_actor_name(data.medico, principal)

        require_fields(
            {
                "paciente_id": data.paciente_id,
                "medico_id": medico_id,
                "fecha_consulta": data.fecha_consulta,
                "medico": medico,
            },
            context="initial consultation",
        )

        fecha_consulta = parse_date_string(data.fecha_consulta)  # type: ignore[arg-type]
        fecha_primer_sintoma = _optional_date(data.fecha_primer_sintoma)
        menstruacion_ultima = _optional_date(data.menstruacion_ultima)

        imagenes = ingest_images(images, storage, INITIAL_CONSULTATION_FOLDER)

        consultation = InitialConsultation(
            id_consulta=new_record_id(),
            paciente_id=data.paciente_id,
            medico_id=medico_id,
            fecha_consulta=fecha_consulta,
            medico=medico,
            primer_sintoma=text_or_none(data.primer_sintoma),
            fecha_primer_sintoma=fecha_primer_sintoma,
            antecedentes_medicos=text_or_none(data.antecedentes_medicos),
            antecedentes_quirurgicos=text_or_none(data.antecedentes_quirurgicos),
            revision_sistemas=text_or_none(data.revision_sistemas),
            menstruacion_menarca=text_or_none(data.menstruacion_menarca),
            menstruacion_ultima=menstruacion_ultima,
            gravidez=int_or_zero(data.gravidez),
            partos=int_or_zero(data.partos),
            abortos=int_or_zero(data.abortos),
            habitos_tabaco=int_or_zero(data.habitos_tabaco),
            habitos_otros=text_or_none(data.habitos_otros),
            historia_familiar=text_or_none(data.historia_familiar),
            diagnostico=text_or_none(data.diagnostico),
            tratamiento=text_or_none(data.tratamiento),
            usuario_registro=principal.user_id if principal else None,
            imagenes=imagenes,
        )
        db.add(consultation)
        db.commit()
        logger.info(f"Created initial consultation {consultation.id_consulta} for patient {data.paciente_id}")

        AuditService.log_create(
            db,
            user_id=principal.user_id if principal else None,
            table=InitialConsultation.__tablename__,
            description=f"Nueva consulta inicial para paciente {data.paciente_id}",
            new_data={"id_consulta": consultation.id_consulta, "paciente_id": data.paciente_id, "medico_id": medico_id},
        )
        return consultation

    @staticmethod
    def create_follow_up(
        db: Session,
        storage: ObjectStorage,
        principal: Optional[UserContext],
        data: FollowUpInput,
        images: Sequence[Optional[ImageUpload]] = (),
    ) -> FollowUpConsultation:
        """
        Create a follow-up consultation.

        Same contract as create_initial_consultation, with `fecha` as the
        required visit date and images stored under the follow-up folder.
        """
        medico_id = resolve_actor_id(data.medico_id, principal)
        medico = resolve_actor_name(data.medico, principal)

        require_fields(
            {
                "paciente_id": data.paciente_id,
                "medico_id": medico_id,
                "fecha": data.fecha,
                "medico": medico,
            },
            context="follow-up consultation",
        )

        fecha = parse_date_string(data.fecha)  # type: ignore[arg-type]

        imagenes = ingest_images(images, storage, FOLLOW_UP_CONSULTATION_FOLDER)

        follow_up = FollowUpConsultation(
            id_seguimiento=new_record_id(),
            paciente_id=data.paciente_id,
            medico_id=medico_id,
            fecha=fecha,
            medico=medico,
            evolucion=text_or_none(data.evolucion),
            notas=text_or_none(data.notas),
            tratamiento_actual=text_or_none(data.tratamiento_actual),
            usuario_registro=principal.user_id if principal else None,
            imagenes=imagenes,
        )
        db.add(follow_up)
        db.commit()
        logger.info(f"Created follow-up consultation {follow_up.id_seguimiento} for patient {data.paciente_id}")

        AuditService.log_create(
            db,
            user_id=principal.user_id if principal else None,
            table=FollowUpConsultation.__tablename__,
            description=f"Nueva consulta de seguimiento para paciente {data.paciente_id}",
            new_data={"id_seguimiento": follow_up.id_seguimiento, "paciente_id": data.paciente_id, "medico_id": medico_id},
        )
        return follow_up
