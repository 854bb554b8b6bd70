"""
Services package for shared business logic.

This package contains service classes that encapsulate the record intake
logic shared across the API endpoints. Import the modules directly, e.g.
`from services.patient_service import PatientService`.
"""
