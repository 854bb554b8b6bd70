# pyright: reportMissingTypeStubs=false
"""
System diagnostic endpoints.

Used by the frontend and deploy checks to confirm requests reach the API
with the expected URL and method.
"""

import logging
from typing import Dict

from fastapi import APIRouter, Request

from utils.datetime_utils import guatemala_now

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/test", summary="Connectivity test")
async def connectivity_test(request: Request) -> Dict[str, str]:
    """Echo back how the request was received."""
    logger.info(f"Connectivity test: {request.method} {request.url}")
    return {
        "status": "success",
        "message": "API funcionando correctamente",
        "timestamp": guatemala_now().isoformat(),
        "url": str(request.url),
        "method": request.method,
    }
