"""
Integration tests for the patient endpoints.

Tests registration, duplicate handling, search and lookup through the API.
"""

from datetime import date
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from main import app
from models import FamilyReference, Patient, RecordFolder

client = TestClient(app)


def _patient_count(db_session) -> int:
    return db_session.query(Patient).count()


class TestCreatePatient:
    """Test POST /api/pacientes."""

    def test_create_patient(self, db_session, auth_headers, doctor, sample_patient_data):
        response = client.post("/api/pacientes", json=sample_patient_data, headers=auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Paciente registrado exitosamente"

        paciente = data["paciente"]
        assert paciente["id_paciente"]
        assert paciente["nombres"] == "María José"
        assert paciente["numero_registro_medico"] == "EXP-0001"
        assert paciente["fecha_nacimiento"] == "1990-04-12"
        assert paciente["correo_electronico"] == "maria@example.com"
        assert paciente["padre_madre"] == "Rosa Pérez"
        assert paciente["usuario_registro"] == doctor.id_usuario

        reference = db_session.query(FamilyReference).filter_by(paciente_id=paciente["id_paciente"]).one()
        assert reference.nombre_referencia == "Carlos Pérez"
        assert reference.telefono == "5555-9876"
        assert db_session.query(RecordFolder).filter_by(paciente_id=paciente["id_paciente"]).count() == 1

    def test_missing_fields_are_all_listed(self, db_session, auth_headers):
        response = client.post("/api/pacientes", json={"nombres": "Juan", "sexo": ""}, headers=auth_headers)

        assert response.status_code == 400
        error = response.json()["error"]
        for field in ["apellidos", "numeroExpediente", "fechaNacimiento", "sexo"]:
            assert field in error
        assert "nombres" not in error
        assert _patient_count(db_session) == 0

    def test_duplicate_registration_number(self, db_session, auth_headers, sample_patient_data):
        first = client.post("/api/pacientes", json=sample_patient_data, headers=auth_headers)
        assert first.status_code == 201
        assert _patient_count(db_session) == 1

        duplicate = dict(sample_patient_data, nombres="Pedro", dpi="1111111111111")
        response = client.post("/api/pacientes", json=duplicate, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == (
            "El número de expediente EXP-0001 ya está en uso. Por favor, use otro número."
        )
        assert _patient_count(db_session) == 1

    def test_age_is_derived_from_birth_date(self, auth_headers, sample_patient_data):
        payload = dict(sample_patient_data, fechaNacimiento="2000-06-15T00:00:00.000Z")

        with patch("utils.datetime_utils.guatemala_today", return_value=date(2024, 3, 1)):
            response = client.post("/api/pacientes", json=payload, headers=auth_headers)
        assert response.status_code == 201
        patient_id = response.json()["paciente"]["id_paciente"]

        lookup = client.get(f"/api/pacientes/{patient_id}", headers=auth_headers)

        assert lookup.status_code == 200
        assert lookup.json()["paciente"]["edad"] == 23
        assert lookup.json()["paciente"]["fecha_nacimiento"] == "2000-06-15"

    def test_unparseable_birth_date_gives_age_zero(self, auth_headers, sample_patient_data):
        payload = dict(sample_patient_data, fechaNacimiento="sin fecha")

        response = client.post("/api/pacientes", json=payload, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["paciente"]["edad"] == 0
        assert response.json()["paciente"]["fecha_nacimiento"] is None

    def test_generated_ids_differ(self, auth_headers, sample_patient_data):
        first = client.post("/api/pacientes", json=sample_patient_data, headers=auth_headers)
        second = client.post(
            "/api/pacientes", json=dict(sample_patient_data, numeroExpediente="EXP-0002"), headers=auth_headers
        )

        assert first.status_code == second.status_code == 201
        assert first.json()["paciente"]["id_paciente"] != second.json()["paciente"]["id_paciente"]

    def test_missing_secondary_table_does_not_fail(self, db_engine, auth_headers, sample_patient_data):
        FamilyReference.__table__.drop(bind=db_engine)

        response = client.post("/api/pacientes", json=sample_patient_data, headers=auth_headers)

        assert response.status_code == 201

    def test_missing_patient_table_is_configuration_error(self, db_engine, auth_headers, sample_patient_data):
        Patient.__table__.drop(bind=db_engine)

        response = client.post("/api/pacientes", json=sample_patient_data, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Error de configuración de base de datos. Contacte al administrador."
        }

    def test_requires_authentication(self, db_session, sample_patient_data):
        response = client.post("/api/pacientes", json=sample_patient_data)

        assert response.status_code == 401
        assert response.json() == {"error": "No autenticado"}
        assert _patient_count(db_session) == 0

    def test_inactive_user_is_rejected(self, user_factory, headers_for, sample_patient_data):
        inactive = user_factory(activo=False)

        response = client.post("/api/pacientes", json=sample_patient_data, headers=headers_for(inactive))

        assert response.status_code == 401


class TestListPatients:
    """Test GET /api/pacientes."""

    @pytest.fixture
    def registered(self, auth_headers, sample_patient_data):
        others = [
            dict(sample_patient_data, nombres="Luis", apellidos="Toj", dpi="3000", numeroExpediente="HC-10"),
            dict(sample_patient_data, nombres="Sofía", apellidos="Ixcot", dpi="4000", numeroExpediente="HC-11"),
        ]
        for payload in [sample_patient_data] + others:
            response = client.post("/api/pacientes", json=payload, headers=auth_headers)
            assert response.status_code == 201

    def test_list_most_recent_first(self, auth_headers, registered):
        response = client.get("/api/pacientes", headers=auth_headers)

        assert response.status_code == 200
        assert [p["nombres"] for p in response.json()["pacientes"]] == ["Sofía", "Luis", "María José"]

    def test_search(self, auth_headers, registered):
        response = client.get("/api/pacientes", params={"search": "HC-1"}, headers=auth_headers)

        assert [p["nombres"] for p in response.json()["pacientes"]] == ["Sofía", "Luis"]

    def test_search_by_dpi(self, auth_headers, registered):
        response = client.get("/api/pacientes", params={"search": "4000"}, headers=auth_headers)

        assert [p["apellidos"] for p in response.json()["pacientes"]] == ["Ixcot"]

    def test_empty_result(self, auth_headers, registered):
        response = client.get("/api/pacientes", params={"search": "zzz"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"pacientes": []}

    def test_requires_authentication(self):
        assert client.get("/api/pacientes").status_code == 401


class TestGetPatient:
    """Test GET /api/pacientes/{id_paciente}."""

    def test_not_found(self, auth_headers):
        response = client.get("/api/pacientes/no-existe", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Paciente no encontrado"}
