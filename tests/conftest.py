# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
from typing import Generator

from main import create_app
from core.permission_engine import PermissionDerivationEngine
from core.steps import TEAM_WIZARD_STEPS, TENANT_WIZARD_STEPS
from core.wizard import WizardController


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = Mock()
    mock_table = Mock()
    mock_client.table.return_value = mock_table
    return mock_client


@pytest.fixture
def submit_handler():
    """Stand-in persistence collaborator that echoes an id."""
    return Mock(return_value={"id": "member-1"})


@pytest.fixture
def team_controller(submit_handler):
    return WizardController(
        TEAM_WIZARD_STEPS,
        submit_handler=submit_handler,
        derivation=PermissionDerivationEngine(),
        name="team-wizard",
    )


@pytest.fixture
def tenant_controller(submit_handler):
    return WizardController(
        TENANT_WIZARD_STEPS,
        submit_handler=submit_handler,
        name="tenant-wizard",
    )


# Field values that satisfy each team step, applied in order
TEAM_STEP_VALUES = {
    1: {"firstName": "Jane", "lastName": "Doe", "email": "jane.doe@example.com"},
    2: {
        "department": "Property Management",
        "hireDate": "2024-01-15",
        "employmentStatus": "Full-time",
    },
    3: {"role": "PROPERTY_MANAGER"},
    4: {"salary": 55000},
    5: {"assignedProperties": ["prop-1"]},
}

TENANT_STEP_VALUES = {
    1: {"firstName": "Sam", "lastName": "Rivera", "email": "sam.rivera@example.com"},
    2: {"currentAddress": "12 Harbor Way", "employmentStatus": "Full-time", "monthlyIncome": 6200},
    3: {
        "propertyId": "prop-1",
        "unitId": "unit-4b",
        "leaseStartDate": "2025-02-01",
        "leaseEndDate": "2026-01-31",
        "monthlyRent": 1850,
        "securityDeposit": 1850,
    },
    4: {
        "emergencyContactName": "Alex Rivera",
        "emergencyContactPhone": "555-0100",
        "backgroundCheckConsent": True,
        "creditCheckConsent": True,
    },
    5: {"agreeToTerms": True},
}


def fill_and_advance(controller: WizardController, step_values: dict) -> None:
    """Fill every step and walk forward to the last one."""
    for step_id in sorted(step_values):
        controller.update_fields(step_values[step_id])
        if step_id < controller.step_count:
            assert controller.go_next(), controller.step_errors(step_id)


@pytest.fixture
def completed_team_controller(team_controller):
    fill_and_advance(team_controller, TEAM_STEP_VALUES)
    return team_controller


@pytest.fixture
def completed_tenant_controller(tenant_controller):
    fill_and_advance(tenant_controller, TENANT_STEP_VALUES)
    return tenant_controller


@pytest.fixture(autouse=True)
def reset_sessions():
    """Drop open wizard sessions before and after each test."""
    from core.wizard_sessions import get_session_store
    get_session_store().clear()
    yield
    get_session_store().clear()


@pytest.fixture
def team_step_values():
    return {step_id: dict(values) for step_id, values in TEAM_STEP_VALUES.items()}


@pytest.fixture
def tenant_step_values():
    return {step_id: dict(values) for step_id, values in TENANT_STEP_VALUES.items()}
