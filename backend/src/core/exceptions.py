"""
Domain exceptions raised by the record intake services.

Each exception carries the HTTP status and the user-facing message; the
handlers registered in main.py turn them into `{"error": ...}` responses.
"""

from typing import List, Optional


class IntakeError(Exception):
    """Base class for errors surfaced to the caller by the intake pipeline."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class MissingFieldsError(IntakeError):
    """One or more required fields are absent; names every one of them."""

    status_code = 400

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(f"Faltan campos requeridos: {', '.join(self.fields)}")


class AttachmentRejectedError(IntakeError):
    """An attached image has an unsupported type or exceeds the size limit."""

    status_code = 400


class AttachmentUploadError(IntakeError):
    """The object store failed while receiving an attached image."""

    status_code = 500

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Error al subir la imagen {filename} al almacenamiento de archivos")


class DuplicateRegistrationNumberError(IntakeError):
    """A patient with the same registration number already exists."""

    status_code = 400

    def __init__(self, registration_number: str):
        self.registration_number = registration_number
        super().__init__(
            f"El número de expediente {registration_number} ya está en uso. Por favor, use otro número."
        )


class RecordPersistenceError(IntakeError):
    """A storage failure translated into a caller-facing message."""

    status_code = 500
