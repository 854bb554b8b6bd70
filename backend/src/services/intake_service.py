"""
Record intake pipeline shared by every record-creating endpoint.

Consultations, follow-ups, assessments and patients all go through the same
steps: resolve who is acting, reject the request if required fields are
missing (naming all of them at once), ingest image attachments, generate the
record identifier and persist. This module holds those shared steps; the
per-kind services compose them.
"""

import json
import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from auth.dependencies import UserContext
from core.constants import ALLOWED_IMAGE_TYPES, DEFAULT_ACTOR_NAME, MAX_IMAGE_SIZE_BYTES
from core.exceptions import AttachmentRejectedError, AttachmentUploadError, MissingFieldsError
from utils.file_storage import ObjectStorage

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    """An attached image as received from the client."""
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def new_record_id() -> str:
    """Generate a fresh identifier for a record about to be persisted."""
    return str(uuid.uuid4())


def resolve_actor_id(supplied: Optional[str], principal: Optional[UserContext]) -> Optional[str]:
    """The supplied actor id, or the principal's id when none was sent."""
    if supplied:
        return supplied
    return principal.user_id if principal else None


def resolve_actor_name(supplied: Optional[str], principal: Optional[UserContext]) -> str:
    """
    The supplied display name, or one built from the principal.

    Falls back to the principal's given names alone, then to a generic
    placeholder, so the result is never empty.
    """
    if supplied:
        return supplied
    if principal and principal.display_name:
        return principal.display_name
    return DEFAULT_ACTOR_NAME


def require_fields(values: Mapping[str, Any], context: str = "record") -> None:
    """
    Raise MissingFieldsError naming every empty entry of `values`.

    `values` maps the field name reported to the caller to its resolved value.
    """
    missing = [name for name, value in values.items() if value is None or value == ""]
    if missing:
        logger.warning(f"Missing required fields for {context}: {missing}")
        raise MissingFieldsError(missing)


def text_or_none(value: Optional[str]) -> Optional[str]:
    """Empty strings are stored as NULL."""
    if value is None:
        return None
    return value if value.strip() else None


_LEADING_INT = re.compile(r"[+-]?[0-9]+")


def _leading_int(value: Any) -> Optional[int]:
    """ASCII leading integer of `value`'s text, or None when there is none."""
    match = _LEADING_INT.match(str(value).strip())
    return int(match.group()) if match else None


def int_or_zero(value: Any) -> int:
    """
    Parse a leading integer, falling back to 0.

    Only used for the counts where absence means zero (gravidity, births,
    abortions, tobacco habit). "3 embarazos" parses as 3.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)

    parsed = _leading_int(value)
    return parsed if parsed is not None else 0


def parse_image_count(value: Any) -> int:
    """Number of indexed image fields the client says it sent; 0 when unusable."""
    if value is None:
        return 0
    parsed = _leading_int(value)
    return max(parsed, 0) if parsed is not None else 0


def validate_images(images: Sequence[Optional[ImageUpload]]) -> List[ImageUpload]:
    """
    Check every attachment before anything is uploaded.

    Absent or empty files are skipped. The first image with a type outside
    ALLOWED_IMAGE_TYPES or above MAX_IMAGE_SIZE_BYTES rejects the whole
    request.

    Returns:
        The accepted images, in index order.
    """
    accepted: List[ImageUpload] = []
    for index, image in enumerate(images):
        if image is None or image.size == 0:
            continue
        if image.content_type not in ALLOWED_IMAGE_TYPES:
            raise AttachmentRejectedError(
                f"Tipo de archivo no permitido para imagen {index + 1}. Solo se permiten JPG, PNG, GIF, WEBP."
            )
        if image.size > MAX_IMAGE_SIZE_BYTES:
            raise AttachmentRejectedError(
                f"El archivo {image.filename} es demasiado grande. Máximo 5MB."
            )
        accepted.append(image)
    return accepted


def upload_images(images: Sequence[ImageUpload], storage: ObjectStorage, folder: str) -> List[str]:
    """
    Upload accepted images one at a time, in order.

    Stops at the first failure; objects already uploaded stay in the store.
    """
    urls: List[str] = []
    for position, image in enumerate(images, start=1):
        try:
            url = storage.upload_file(image.content, image.filename, image.content_type, folder)
        except Exception as e:
            logger.exception(f"Failed to upload image {position} ({image.filename}) to {folder}: {e}")
            raise AttachmentUploadError(image.filename) from e
        urls.append(url)
        logger.info(f"Image {position} uploaded to {folder}: {url}")
    return urls


def serialize_urls(urls: Sequence[str]) -> Optional[str]:
    """JSON array of URLs, or None when there are none."""
    return json.dumps(list(urls)) if urls else None


def ingest_images(
    images: Sequence[Optional[ImageUpload]],
    storage: ObjectStorage,
    folder: str,
) -> Optional[str]:
    """
    Validate, upload and serialize the attachments of one request.

    Returns:
        The serialized URL list to store with the record, or None.
    """
    accepted = validate_images(images)
    if not accepted:
        return None
    return serialize_urls(upload_images(accepted, storage, folder))
