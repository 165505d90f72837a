from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from prepwise.core.exceptions import (
    ConfigurationError,
    InputValidationError,
    MalformedResponseError,
    register_exception_handlers,
)


def create_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    def _boom() -> None:
        raise RuntimeError("kaboom")

    @app.get("/config")
    def _config() -> None:
        raise ConfigurationError("missing setting", code="missing_setting")

    @app.get("/input")
    def _input() -> None:
        raise InputValidationError(
            "Missing required field(s): companyName", details={"missing": ["companyName"]}
        )

    @app.get("/malformed")
    def _malformed() -> None:
        raise MalformedResponseError()

    @app.get("/http")
    def _http() -> None:
        raise HTTPException(status_code=404, detail="not found")

    @app.get("/needs-int")
    def _needs_int(x: int) -> dict[str, int]:
        return {"x": x}

    return app


def test_prepwise_exception_handler_shape_and_status():
    client = TestClient(create_app())
    resp = client.get("/config")
    assert resp.status_code == 500
    data = resp.json()
    assert data["error"] == "missing setting"
    assert data["code"] == "missing_setting"
    assert data["type"] == "ConfigurationError"


def test_input_validation_error_names_missing_fields():
    client = TestClient(create_app())
    resp = client.get("/input")
    assert resp.status_code == 422
    data = resp.json()
    assert data["code"] == "invalid_input"
    assert data["details"] == {"missing": ["companyName"]}


def test_malformed_response_has_default_message():
    client = TestClient(create_app())
    resp = client.get("/malformed")
    assert resp.status_code == 502
    data = resp.json()
    assert data["error"] == "Invalid response from AI service. Please try again."
    assert data["code"] == "malformed_ai_response"


def test_http_exception_is_normalized():
    client = TestClient(create_app())
    resp = client.get("/http")
    assert resp.status_code == 404
    data = resp.json()
    assert data["error"] == "not found"
    assert data["code"] == "not_found"
    assert data["type"] == "HTTPException"


def test_validation_errors_are_normalized():
    client = TestClient(create_app())
    resp = client.get("/needs-int")
    assert resp.status_code == 422
    data = resp.json()
    assert data["error"] == "Validation error"
    assert data["code"] == "validation_error"
    assert isinstance(data["details"], list)


def test_unhandled_exceptions_are_normalized_and_do_not_leak_message():
    client = TestClient(create_app(), raise_server_exceptions=False)
    resp = client.get("/boom")
    assert resp.status_code == 500
    data = resp.json()
    assert data["error"] == "Internal server error"
    assert data["code"] == "internal_error"
    assert "kaboom" not in resp.text


def test_validation_status_avoids_deprecated_starlette_constant():
    import inspect

    from prepwise.core import exceptions

    assert "HTTP_422_UNPROCESSABLE_ENTITY" not in inspect.getsource(exceptions)
