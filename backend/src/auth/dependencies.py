# pyright: reportMissingTypeStubs=false
"""
Authentication dependencies for FastAPI.

Provides the identity verifier: bearer token validation and the
authenticated principal handed to the record intake services.
"""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from core.database import get_db
from services.jwt_service import jwt_service, TokenPayload
from models import User

logger = logging.getLogger(__name__)


class UserContext:
    """Authenticated principal extracted from the JWT token and the users table."""

    def __init__(
        self,
        user_id: str,
        email: str,
        role: str,
        nombres: Optional[str] = None,
        apellidos: Optional[str] = None,
    ):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.nombres = nombres
        self.apellidos = apellidos

    @property
    def display_name(self) -> Optional[str]:
        """Given and family names joined, or just the given names when that is all we have."""
        if self.nombres and self.apellidos:
            return f"{self.nombres} {self.apellidos}"
        return self.nombres or None

    def __repr__(self) -> str:
        return f"UserContext(user_id='{self.user_id}', email='{self.email}', role='{self.role}')"


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenPayload]:
    """Extract and validate JWT token payload."""
    if not credentials:
        return None

    return jwt_service.verify_token(credentials.credentials)


def get_current_user(
    payload: Optional[TokenPayload] = Depends(get_token_payload),
    db: Session = Depends(get_db)
) -> UserContext:
    """Get authenticated user context from JWT token."""
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No autenticado"
        )

    user = db.get(User, payload.sub)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario no encontrado"
        )

    if not user.activo:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Cuenta desactivada, contacte al administrador"
        )

    return UserContext(
        user_id=user.id_usuario,
        email=user.correo,
        role=user.rol,
        nombres=user.nombres,
        apellidos=user.apellidos,
    )


def require_authenticated(user: UserContext = Depends(get_current_user)) -> UserContext:
    """Require any authenticated, active user."""
    return user

