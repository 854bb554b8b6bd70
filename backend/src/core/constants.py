"""Application constants and configuration values."""

from core.config import FRONTEND_URL

# Database connection settings
DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes

# CORS origins for development and production
_CORS_ORIGINS_RAW = [
    "http://localhost:3000",      # Frontend dev server
    FRONTEND_URL,
]

# Filter out None values and empty strings to avoid CORS errors
CORS_ORIGINS = [origin for origin in dict.fromkeys(_CORS_ORIGINS_RAW) if origin and origin.strip()]

# Image attachments
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")
MAX_IMAGE_SIZE_BYTES = 5 * 1024 * 1024  # 5 MiB per file
IMAGE_COUNT_FIELD = "imagenes_count"
IMAGE_FIELD_TEMPLATE = "imagen_{index}"

# Object storage folders, one per record kind
INITIAL_CONSULTATION_FOLDER = "consultas/inicial"
FOLLOW_UP_CONSULTATION_FOLDER = "consultas/seguimiento"

# Display name used when neither the request nor the principal provides one
DEFAULT_ACTOR_NAME = "Médico"

# Patient search
PATIENT_SEARCH_LIMIT = 50

# Family reference rows created alongside a patient
FAMILY_REFERENCE_RELATIONSHIP = "Responsable"

# Audit actions
AUDIT_ACTION_CREATE = "CREATE"
