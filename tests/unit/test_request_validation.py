"""Unit tests for the route-level request validation gate."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi.testclient import TestClient
from pydantic import EmailStr
from pydantic import Field

from lifetrack.core.handlers import register_error_handlers
from lifetrack.core.request_validation import ValidatedRequest
from lifetrack.core.request_validation import ValidationSchema
from lifetrack.core.request_validation import validate_request
from lifetrack.core.responses import success_response
from lifetrack.core.validation import RuleSet
from lifetrack.schemas.goals import LIST_GOALS
from lifetrack.schemas.life_areas import UPDATE_LIFE_AREA

VALID_UUID = "123e4567-e89b-12d3-a456-426614174000"


class PersonBody(RuleSet):
    name: str = Field(min_length=3, max_length=50)
    email: EmailStr
    age: int | None = Field(default=None, ge=18, le=120)


class SearchQuery(RuleSet):
    limit: int = Field(default=20, ge=1, le=100)
    page: int = Field(default=1, ge=1)
    search: str | None = None


class ItemParams(RuleSet):
    id: UUID


class TagQuery(RuleSet):
    tags: list[str] | None = None


def _build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.post("/test-body")
    def body_route(validated: ValidatedRequest = Depends(validate_request(ValidationSchema(body=PersonBody)))):
        return success_response(validated.body)

    @app.get("/test-query")
    def query_route(validated: ValidatedRequest = Depends(validate_request(ValidationSchema(query=SearchQuery)))):
        return success_response(validated.query)

    @app.get("/test-tags")
    def tags_route(validated: ValidatedRequest = Depends(validate_request(ValidationSchema(query=TagQuery)))):
        return success_response(validated.query)

    @app.get("/test-params/{id}")
    def params_route(validated: ValidatedRequest = Depends(validate_request(ValidationSchema(params=ItemParams)))):
        return success_response(validated.params)

    all_facets = ValidationSchema(body=PersonBody, query=SearchQuery, params=ItemParams)

    @app.post("/test-all/{id}")
    def all_route(request: Request, validated: ValidatedRequest = Depends(validate_request(all_facets))):
        assert request.state.validated is validated
        return success_response({"body": validated.body, "query": validated.query, "params": validated.params})

    @app.get("/unchecked/{slug}")
    def unchecked_route(validated: ValidatedRequest = Depends(validate_request(ValidationSchema()))):
        return success_response({"body": validated.body, "query": validated.query, "params": validated.params})

    return TestClient(app)


def _field_errors(payload: dict) -> list[dict]:
    return payload["error"]["details"]["field_errors"]


def test_valid_body_passes_through_sanitized() -> None:
    client = _build_client()

    response = client.post("/test-body", json={"name": "John Doe", "email": "john@example.com", "age": 25})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"] == {"name": "John Doe", "email": "john@example.com", "age": 25}


def test_missing_required_body_field_is_rejected() -> None:
    client = _build_client()

    response = client.post("/test-body", json={"name": "John Doe"})

    assert response.status_code == 422
    payload = response.json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "VALIDATION_ERROR"
    assert payload["error"]["message"] == "Request validation failed"
    assert [item["field"] for item in _field_errors(payload)] == ["email"]


def test_all_body_violations_are_reported_together() -> None:
    client = _build_client()

    response = client.post("/test-body", json={"name": "Jo", "email": "invalid-email", "age": 15})

    assert response.status_code == 422
    errors = _field_errors(response.json())
    assert [item["field"] for item in errors] == ["name", "email", "age"]
    for item in errors:
        assert set(item) == {"field", "message", "type"}


def test_unknown_body_fields_are_stripped() -> None:
    client = _build_client()

    response = client.post(
        "/test-body",
        json={"name": "John Doe", "email": "john@example.com", "unknownField": "should be stripped"},
    )

    assert response.status_code == 200
    assert "unknownField" not in response.json()["data"]


def test_malformed_json_body_is_a_body_violation() -> None:
    client = _build_client()

    response = client.post("/test-body", content=b"{not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 422
    errors = _field_errors(response.json())
    assert len(errors) == 1
    assert errors[0]["field"] == "body"
    assert errors[0]["type"] == "json_invalid"


def test_query_defaults_and_coercion() -> None:
    client = _build_client()

    defaulted = client.get("/test-query")
    explicit = client.get("/test-query", params={"limit": "10", "page": "2", "search": "test"})

    assert defaulted.json()["data"] == {"limit": 20, "page": 1}
    assert explicit.json()["data"] == {"limit": 10, "page": 2, "search": "test"}


def test_invalid_query_uses_query_message() -> None:
    client = _build_client()

    response = client.get("/test-query", params={"limit": "150"})

    assert response.status_code == 422
    payload = response.json()
    assert payload["error"]["code"] == "VALIDATION_ERROR"
    assert payload["error"]["message"] == "Query parameter validation failed"
    assert [item["field"] for item in _field_errors(payload)] == ["limit"]


def test_invalid_path_param_uses_params_message() -> None:
    client = _build_client()

    response = client.get("/test-params/invalid-uuid")

    assert response.status_code == 422
    payload = response.json()
    assert payload["error"]["code"] == "VALIDATION_ERROR"
    assert payload["error"]["message"] == "Path parameter validation failed"
    assert [item["field"] for item in _field_errors(payload)] == ["id"]


def test_valid_path_param_passes() -> None:
    client = _build_client()

    response = client.get(f"/test-params/{VALID_UUID}")

    assert response.status_code == 200
    assert response.json()["data"] == {"id": VALID_UUID}


def test_all_facets_are_replaced_with_sanitized_values() -> None:
    client = _build_client()

    response = client.post(
        f"/test-all/{VALID_UUID}",
        params={"limit": "15", "page": "3", "extra": "dropped"},
        json={"name": "Jane Doe", "email": "jane@example.com", "age": 30},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["body"] == {"name": "Jane Doe", "email": "jane@example.com", "age": 30}
    assert data["query"] == {"limit": 15, "page": 3}
    assert data["params"] == {"id": VALID_UUID}


def test_first_failing_facet_stops_validation() -> None:
    client = _build_client()

    response = client.post("/test-all/invalid-uuid", params={"limit": "150"}, json={"name": "Jane Doe"})

    assert response.status_code == 422
    payload = response.json()
    assert payload["error"]["message"] == "Request validation failed"
    assert [item["field"] for item in _field_errors(payload)] == ["email"]


def test_query_failure_is_reported_before_params() -> None:
    client = _build_client()

    response = client.post(
        "/test-all/invalid-uuid",
        params={"limit": "150", "page": "0"},
        json={"name": "Jane Doe", "email": "jane@example.com"},
    )

    payload = response.json()
    assert payload["error"]["message"] == "Query parameter validation failed"
    assert [item["field"] for item in _field_errors(payload)] == ["limit", "page"]


def test_unconfigured_facets_pass_through_unchecked() -> None:
    client = _build_client()

    response = client.get("/unchecked/anything", params={"free": "form"})

    assert response.status_code == 200
    assert response.json()["data"] == {"body": None, "query": {"free": "form"}, "params": {"slug": "anything"}}


def test_repeated_query_keys_keep_every_value() -> None:
    client = _build_client()

    checked = client.get("/test-tags", params=[("tags", "health"), ("tags", "focus")])
    unchecked = client.get("/unchecked/anything", params=[("tag", "a"), ("tag", "b"), ("single", "c")])

    assert checked.status_code == 200
    assert checked.json()["data"] == {"tags": ["health", "focus"]}
    assert unchecked.json()["data"]["query"] == {"tag": ["a", "b"], "single": "c"}


def test_route_schema_constants_plug_into_the_gate() -> None:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/goals")
    def list_goals(validated: ValidatedRequest = Depends(validate_request(LIST_GOALS))):
        return success_response(validated.query)

    @app.put("/life-areas/{id}")
    def update_life_area(validated: ValidatedRequest = Depends(validate_request(UPDATE_LIFE_AREA))):
        return success_response(validated.body)

    client = TestClient(app)

    listed = client.get("/goals", params={"goalType": "habit"})
    updated = client.put("/life-areas/not-a-uuid", json={"name": "Fitness"})

    assert listed.json()["data"] == {"limit": 20, "page": 1, "goalType": "habit"}
    assert updated.status_code == 422
    assert updated.json()["error"]["message"] == "Path parameter validation failed"
