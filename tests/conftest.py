import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from valuecheck.presentation.error_handlers import register_error_handlers
from valuecheck.request_utils import RequestData


@pytest.fixture(name="make_request")
def make_request_fixture():
    """Factory for RequestData objects with the four lookup locations."""

    def make_request(params=None, body=None, query=None, headers=None) -> RequestData:
        return RequestData(
            params=params or {},
            body=body or {},
            query=query or {},
            headers=headers or {},
        )

    return make_request


@pytest.fixture(name="app")
def app_fixture():
    """Bare FastAPI application with the valuecheck error handlers installed."""
    app = FastAPI()
    register_error_handlers(app)
    return app


@pytest.fixture(name="client")
def client_fixture(app: FastAPI):
    """Test client for making HTTP requests."""
    with TestClient(app) as client:
        yield client
