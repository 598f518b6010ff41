import pytest
from commerce.api import install_components, register_error_handlers, router
from fastapi import FastAPI
from fastapi.testclient import TestClient

ADMIN_KEY = "admin-secret"


@pytest.fixture()
def api_settings(settings):
    from dataclasses import replace

    return replace(settings, admin_api_key=ADMIN_KEY)


@pytest.fixture()
def client(api_settings, gateway):
    app = FastAPI()
    install_components(app, api_settings, gateway)
    register_error_handlers(app)
    app.include_router(router)
    return TestClient(app)


@pytest.fixture()
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_KEY}"}
