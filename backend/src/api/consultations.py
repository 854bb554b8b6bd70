# pyright: reportMissingTypeStubs=false
"""
Consultation API endpoints.

Initial and follow-up consultations are submitted as multipart forms: the
clinical fields as text parts, plus `imagenes_count` and that many indexed
`imagen_<i>` file parts.
"""

import logging
from dataclasses import fields
from typing import Any, List, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from api.responses import FollowUpCreateResponse, InitialConsultationCreateResponse
from auth.dependencies import UserContext, require_authenticated
from core.constants import IMAGE_COUNT_FIELD, IMAGE_FIELD_TEMPLATE
from core.database import get_db
from services.consultation_service import ConsultationService, FollowUpInput, InitialConsultationInput
from services.intake_service import ImageUpload, parse_image_count
from utils.file_storage import ObjectStorage, get_object_storage

logger = logging.getLogger(__name__)

router = APIRouter()

InputT = TypeVar("InputT")


def _form_text(form: FormData, name: str) -> Optional[str]:
    value = form.get(name)
    return value if isinstance(value, str) else None


def _form_input(form: FormData, input_cls: Type[InputT]) -> InputT:
    """Build an input dataclass from the text parts named like its fields."""
    values: dict[str, Any] = {field.name: _form_text(form, field.name) for field in fields(input_cls)}  # type: ignore[arg-type]
    return input_cls(**values)


async def _read_images(form: FormData) -> List[Optional[ImageUpload]]:
    """
    Read the indexed image parts of a form.

    An index without a file part yields None so positions in error
    messages match what the client sent.
    """
    count = parse_image_count(form.get(IMAGE_COUNT_FIELD))
    images: List[Optional[ImageUpload]] = []
    for index in range(count):
        part = form.get(IMAGE_FIELD_TEMPLATE.format(index=index))
        if not isinstance(part, UploadFile):
            images.append(None)
            continue
        content = await part.read()
        images.append(
            ImageUpload(
                filename=part.filename or f"imagen_{index}",
                content_type=part.content_type or "",
                content=content,
            )
        )
    return images


@router.post(
    "/inicial",
    summary="Create an initial consultation",
    status_code=status.HTTP_201_CREATED,
    response_model=InitialConsultationCreateResponse,
)
async def create_initial_consultation(
    request: Request,
    current_user: UserContext = Depends(require_authenticated),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
) -> InitialConsultationCreateResponse:
    """
    Create an initial consultation with optional image attachments.

    `medico_id` and `medico` default to the authenticated user. Uploads and
    the database work run in the threadpool.
    """
    form = await request.form()
    data = _form_input(form, InitialConsultationInput)
    images = await _read_images(form)

    consultation = await run_in_threadpool(
        ConsultationService.create_initial_consultation,
        db=db,
        storage=storage,
        principal=current_user,
        data=data,
        images=images,
    )

    return InitialConsultationCreateResponse(
        id_consulta=consultation.id_consulta,
        id=consultation.id_consulta,
        message="Consulta inicial creada exitosamente",
    )


@router.post(
    "/seguimiento",
    summary="Create a follow-up consultation",
    status_code=status.HTTP_201_CREATED,
    response_model=FollowUpCreateResponse,
)
async def create_follow_up(
    request: Request,
    current_user: UserContext = Depends(require_authenticated),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
) -> FollowUpCreateResponse:
    """Create a follow-up consultation with optional image attachments."""
    form = await request.form()
    data = _form_input(form, FollowUpInput)
    images = await _read_images(form)

    follow_up = await run_in_threadpool(
        ConsultationService.create_follow_up,
        db=db,
        storage=storage,
        principal=current_user,
        data=data,
        images=images,
    )

    return FollowUpCreateResponse(
        id_seguimiento=follow_up.id_seguimiento,
        message="Consulta de seguimiento creada exitosamente",
    )
