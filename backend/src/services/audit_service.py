"""
Audit trail recording.

Audit entries are written after the audited record has been committed.
Failures are logged and swallowed: the record already exists, and the
caller must not see an error for it.
"""

import json
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from core.constants import AUDIT_ACTION_CREATE
from models import AuditLog
from services.intake_service import new_record_id
from utils.datetime_utils import guatemala_now

logger = logging.getLogger(__name__)


class AuditService:
    """Service class for the audit trail ("historial")."""

    @staticmethod
    def log_create(
        db: Session,
        user_id: Optional[str],
        table: str,
        description: str,
        new_data: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Record a create action in its own transaction.

        Returns:
            True if the entry was written, False if it was dropped
        """
        try:
            entry = AuditLog(
                id_historial=new_record_id(),
                usuario_id=user_id,
                tabla=table,
                accion=AUDIT_ACTION_CREATE,
                descripcion=description,
                datos_nuevos=json.dumps(new_data, default=str, ensure_ascii=False) if new_data is not None else None,
                created_at=guatemala_now(),
            )
            db.add(entry)
            db.commit()
            return True
        except Exception as e:
            db.rollback()
            logger.warning(f"Audit log write for {table} failed (ignored): {e}")
            return False

