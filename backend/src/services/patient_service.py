"""
Patient service for patient registration and lookup.

Registration is the one multi-row write of the intake pipeline: the patient
row, an optional family reference and the record folder are written in one
transaction. The family reference and the folder are best effort; each runs
in its own savepoint so a failure (for instance a missing table) is dropped
without aborting the patient insert.
"""

import logging
from dataclasses import asdict, dataclass
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from auth.dependencies import UserContext
from core.constants import FAMILY_REFERENCE_RELATIONSHIP, PATIENT_SEARCH_LIMIT
from core.database import Base
from core.exceptions import DuplicateRegistrationNumberError, RecordPersistenceError
from models import FamilyReference, Patient, RecordFolder
from services.audit_service import AuditService
from services.intake_service import new_record_id, require_fields, text_or_none
from utils.datetime_utils import (
    age_from_birth_date_string,
    guatemala_now,
    guatemala_today,
    parse_date_string,
    strip_time_component,
)

logger = logging.getLogger(__name__)

MISSING_TABLE_MESSAGE = "Error de configuración de base de datos. Contacte al administrador."
GENERIC_ERROR_MESSAGE = "Error interno del servidor"


@dataclass
class PatientCreateInput:
    """Submitted patient fields (snake_case)."""
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


def _is_unique_violation(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


def _is_missing_table(error: SQLAlchemyError) -> bool:
    message = str(getattr(error, "orig", error)).lower()
    return "no such table" in message or ("relation" in message and "does not exist" in message) \
        or "doesn't exist" in message


class PatientService:
    """
    Service class for patient operations.

    Contains registration, search and lookup of patients.
    """

    @staticmethod
    def create_patient(
        db: Session,
        principal: UserContext,
        data: PatientCreateInput,
    ) -> Patient:
        """
        Register a new patient.

        Args:
            db: Database session
            principal: Authenticated registrar
            data: Submitted patient fields

        Returns:
            The created Patient, reloaded after commit

        Raises:
            MissingFieldsError: If required fields are missing
            DuplicateRegistrationNumberError: If the registration number is taken
            RecordPersistenceError: If the transaction fails
        """
        require_fields(
            {
                "nombres": data.nombres,
                "apellidos": data.apellidos,
                "numeroExpediente": data.numero_expediente,
                "fechaNacimiento": data.fecha_nacimiento,
                "sexo": data.sexo,
            },
            context="patient",
        )
        numero = data.numero_expediente or ""

        edad = age_from_birth_date_string(data.fecha_nacimiento)
        fecha_nacimiento = None
        try:
            fecha_nacimiento = parse_date_string(strip_time_component(data.fecha_nacimiento or ""))
        except ValueError:
            logger.warning(f"Unparseable birth date {data.fecha_nacimiento!r} for patient {numero}, storing NULL")

        patient_id = new_record_id()
        try:
            existing = db.query(Patient.id_paciente).filter(
                Patient.numero_registro_medico == numero
            ).first()
            if existing:
                logger.warning(f"Duplicate medical record number: {numero}")
                raise DuplicateRegistrationNumberError(numero)

            patient = Patient(
                id_paciente=patient_id,
                nombres=data.nombres,
                apellidos=data.apellidos,
                numero_registro_medico=numero,
                dpi=text_or_none(data.dpi),
                edad=edad,
                sexo=data.sexo,
                telefono=text_or_none(data.telefono),
                correo_electronico=text_or_none(data.correo_electronico),
                direccion=text_or_none(data.direccion),
                fecha_nacimiento=fecha_nacimiento,
                lugar_nacimiento=text_or_none(data.lugar_nacimiento),
                estado_civil=text_or_none(data.estado_civil),
                ocupacion=text_or_none(data.ocupacion),
                raza=text_or_none(data.raza),
                conyuge=text_or_none(data.conyuge),
                padre_madre=text_or_none(data.padre_madre),
                lugar_trabajo=text_or_none(data.lugar_trabajo),
                nombre_responsable=text_or_none(data.nombre_responsable),
                telefono_responsable=text_or_none(data.telefono_responsable),
                usuario_registro=principal.user_id,
                fecha_registro=guatemala_now(),
            )
            db.add(patient)
            db.flush()

            if data.nombre_responsable or data.telefono_responsable:
                PatientService._add_optional_row(
                    db,
                    FamilyReference(
                        id_referencia=new_record_id(),
                        paciente_id=patient_id,
                        nombre_referencia=data.nombre_responsable or "",
                        parentesco=FAMILY_REFERENCE_RELATIONSHIP,
                        telefono=text_or_none(data.telefono_responsable),
                    ),
                )

            PatientService._add_optional_row(
                db,
                RecordFolder(
                    id_expediente=new_record_id(),
                    paciente_id=patient_id,
                    fecha_creacion=guatemala_today(),
                    usuario_creacion=principal.user_id,
                ),
            )

            db.commit()

        except DuplicateRegistrationNumberError:
            db.rollback()
            raise
        except IntegrityError as e:
            db.rollback()
            logger.exception(f"Integrity error creating patient {numero}: {e}")
            if _is_unique_violation(e):
                # Concurrent registration with the same number passed the pre-check
                raise DuplicateRegistrationNumberError(numero) from e
            raise RecordPersistenceError(GENERIC_ERROR_MESSAGE) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception(f"Database error creating patient {numero}: {e}")
            if _is_missing_table(e):
                raise RecordPersistenceError(MISSING_TABLE_MESSAGE) from e
            raise RecordPersistenceError(GENERIC_ERROR_MESSAGE) from e
        except Exception:
            db.rollback()
            raise

        logger.info(f"Created patient {patient_id} ({numero})")

        AuditService.log_create(
            db,
            user_id=principal.user_id,
            table=Patient.__tablename__,
            description=f"Nuevo paciente registrado: {data.nombres} {data.apellidos} ({numero})",
            new_data=asdict(data),
        )

        return PatientService.get_patient(db, patient_id) or patient

    @staticmethod
    def _add_optional_row(db: Session, row: Base) -> bool:
        """
        Insert a secondary row inside a savepoint.

        Returns:
            False if the insert failed and was rolled back to the savepoint
        """
        try:
            with db.begin_nested():
                db.add(row)
                db.flush()
            return True
        except SQLAlchemyError as e:
            logger.info(f"Skipping {type(row).__tablename__} row: {e}")
            return False

    @staticmethod
    def list_patients(db: Session, search: Optional[str] = None) -> List[Patient]:
        """
        List the most recent patients, optionally filtered by a search term.

        The term is matched as a substring of given names, family names,
        national id or medical record number.

        Returns:
            At most PATIENT_SEARCH_LIMIT patients, newest first
        """
        query = db.query(Patient)
        term = (search or "").strip()
        if term:
            pattern = f"%{term}%"
            query = query.filter(
                or_(
                    Patient.nombres.ilike(pattern),
                    Patient.apellidos.ilike(pattern),
                    Patient.dpi.ilike(pattern),
                    Patient.numero_registro_medico.ilike(pattern),
                )
            )

        return query.order_by(
            Patient.created_at.desc(),
            Patient.nombres,
            Patient.apellidos,
        ).limit(PATIENT_SEARCH_LIMIT).all()

    @staticmethod
    def get_patient(db: Session, patient_id: str) -> Optional[Patient]:
        """Get a patient by id, or None."""
        return db.query(Patient).filter(Patient.id_paciente == patient_id).first()
