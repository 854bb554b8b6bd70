"""
Test configuration and shared fixtures for the Expediente Clínico test suite.

Every test gets its own in-memory SQLite database with the full schema, so
tests never see each other's rows. The object store is replaced by a
recording fake unless a test builds its own ObjectStorage.
"""

import os
import uuid

# Must be set before any application module reads its configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SPACES_KEY"] = ""
os.environ["SPACES_SECRET"] = ""
os.environ["SPACES_BUCKET"] = ""
os.environ["SPACES_CDN_ENDPOINT"] = ""

import pytest
from typing import Generator, List, Optional, Tuple

from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import build_engine, create_tables, drop_tables, get_db
from models import User
from services.jwt_service import TokenPayload, jwt_service
from utils.file_storage import ObjectStorage, get_object_storage


class RecordingStorage(ObjectStorage):
    """Object storage that keeps uploads in memory and can be told to fail."""

    def __init__(self):
        super().__init__(bucket="", access_key="", secret_key="", cdn_endpoint="", local_dir="")
        self.uploads: List[Tuple[str, str, str, int]] = []
        self.fail_on: Optional[str] = None

    def upload_file(self, content: bytes, filename: str, content_type: str, folder: str) -> str:
        if self.fail_on is not None and filename == self.fail_on:
            raise RuntimeError("Spaces unavailable")
        self.uploads.append((folder, filename, content_type, len(content)))
        return f"https://cdn.expediente.test/{folder}/{len(self.uploads)}-{filename}"


@pytest.fixture(scope="function")
def db_engine():
    """Fresh in-memory database with every table created."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(bind=engine)

    yield engine

    drop_tables(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Session configured like the application's SessionLocal."""
    TestSession = sessionmaker(
        bind=db_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = TestSession()

    yield session

    session.close()


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture(autouse=True)
def override_dependencies(db_session, storage):
    """Route the app's database and object storage dependencies to the test doubles."""
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_storage] = lambda: storage

    yield

    app.dependency_overrides.clear()


def create_user(
    db_session: Session,
    nombres: str = "Ana",
    apellidos: str = "López",
    rol: str = "medico",
    activo: bool = True,
) -> User:
    user = User(
        id_usuario=str(uuid.uuid4()),
        nombres=nombres,
        apellidos=apellidos,
        correo=f"{uuid.uuid4().hex[:8]}@expediente.test",
        rol=rol,
        activo=activo,
    )
    db_session.add(user)
    db_session.commit()
    return user


def auth_headers_for(user: User) -> dict:
    token = jwt_service.create_access_token(
        TokenPayload(
            sub=user.id_usuario,
            email=user.correo,
            nombres=user.nombres,
            apellidos=user.apellidos,
            rol=user.rol,
        )
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def doctor(db_session) -> User:
    """Active physician."""
    return create_user(db_session)


@pytest.fixture
def auth_headers(doctor) -> dict:
    """Bearer headers for the physician fixture."""
    return auth_headers_for(doctor)


@pytest.fixture
def sample_patient_data() -> dict:
    """Registration payload with every field filled in (camelCase, as the frontend sends it)."""
    return {
        "nombres": "María José",
        "apellidos": "García Pérez",
        "dpi": "2456789010101",
        "numeroExpediente": "EXP-0001",
        "fechaNacimiento": "1990-04-12",
        "sexo": "Femenino",
        "telefono": "5555-1234",
        "correoElectronico": "maria@example.com",
        "direccion": "Zona 1, Ciudad de Guatemala",
        "lugarNacimiento": "Quetzaltenango",
        "estadoCivil": "Casada",
        "ocupacion": "Maestra",
        "raza": "Mestiza",
        "conyuge": "Carlos Pérez",
        "padreMadre": "Rosa Pérez",
        "lugarTrabajo": "Escuela Central",
        "nombreResponsable": "Carlos Pérez",
        "telefonoResponsable": "5555-9876",
    }


@pytest.fixture
def user_factory(db_session):
    """Create users with custom names, role or status."""
    def _create(**kwargs) -> User:
        return create_user(db_session, **kwargs)
    return _create


@pytest.fixture
def headers_for():
    """Build bearer headers for any user."""
    return auth_headers_for
