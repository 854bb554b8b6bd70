# Package initialization
# Import all models so every table is registered on Base.metadata
from .user import User
from .patient import Patient
from .initial_consultation import InitialConsultation
from .follow_up_consultation import FollowUpConsultation
from .assessment import Assessment
from .family_reference import FamilyReference
from .record_folder import RecordFolder
from .audit_log import AuditLog

__all__ = [
    "User",
    "Patient",
    "InitialConsultation",
    "FollowUpConsultation",
    "Assessment",
    "FamilyReference",
    "RecordFolder",
    "AuditLog",
]
