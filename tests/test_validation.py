# =============================================================================
# tests/test_validation.py - Request validation → 400 error envelope
# =============================================================================

from fastapi.exceptions import RequestValidationError

from api_template.utils.error_handlers import collect_field_errors, field_name

VALID_BODY = {
    "name": "Widget",
    "email": "owner@example.com",
    "quantity": 3,
    "priority": "high",
    "tags": ["blue", "small"],
}


class TestFieldName:
    """Tests for turning error locations into field names."""

    def test_body_prefix_is_dropped(self):
        assert field_name(("body", "email")) == "email"

    def test_nested_location_is_dotted(self):
        assert field_name(("body", "items", 0, "qty")) == "items.0.qty"

    def test_query_prefix_is_dropped(self):
        assert field_name(("query", "page")) == "page"

    def test_bare_source_is_kept(self):
        assert field_name(("body",)) == "body"


class TestCollectFieldErrors:

    def test_messages_grouped_per_field(self):
        exc = RequestValidationError([
            {"loc": ("body", "name"), "msg": "too short", "type": "x"},
            {"loc": ("body", "name"), "msg": "blank", "type": "x"},
            {"loc": ("body", "quantity"), "msg": "too big", "type": "x"},
        ])

        assert collect_field_errors(exc) == {
            "name": ["too short", "blank"],
            "quantity": ["too big"],
        }

    def test_invalid_json_is_keyed_by_source(self):
        exc = RequestValidationError([
            {"loc": ("body", 14), "msg": "JSON decode error", "type": "json_invalid"},
        ])

        assert collect_field_errors(exc) == {"body": ["JSON decode error"]}


class TestValidationEnvelope:
    """Invalid bodies yield HTTP 400 with the VALIDATION_ERROR envelope."""

    def test_valid_body_is_echoed(self, client, auth_headers):
        response = client.post("/v2/samples/echo", json=VALID_BODY, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Widget"
        assert body["priority"] == "high"
        assert body["submittedBy"] == "user-123"
        assert body["apiVersion"] == "2.0"
        assert "note" not in body

    def test_invalid_body_returns_400_envelope(self, client, auth_headers):
        payload = {**VALID_BODY, "email": "not-an-email", "quantity": 0}

        response = client.post("/v2/samples/echo", json=payload, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["message"] == "Invalid data format"
        assert set(body["data"]) == {"email", "quantity"}
        assert all(isinstance(msgs, list) and msgs for msgs in body["data"].values())

    def test_only_failing_fields_are_reported(self, client, auth_headers):
        payload = {**VALID_BODY, "tags": ["a", "a"]}

        response = client.post("/v2/samples/echo", json=payload, headers=auth_headers)

        assert response.status_code == 400
        data = response.json()["data"]
        assert list(data) == ["tags"]
        assert "Duplicate tags" in data["tags"][0]

    def test_missing_field_is_reported(self, client, auth_headers):
        payload = {k: v for k, v in VALID_BODY.items() if k != "name"}

        response = client.post("/v2/samples/echo", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert "name" in response.json()["data"]

    def test_missing_body_is_keyed_as_body(self, client, auth_headers):
        response = client.post("/v2/samples/echo", headers=auth_headers)

        assert response.status_code == 400
        assert "body" in response.json()["data"]

    def test_malformed_json_is_keyed_as_body(self, client, auth_headers):
        headers = {**auth_headers, "Content-Type": "application/json"}

        response = client.post("/v2/samples/echo", content='{"name": "x", bad json', headers=headers)

        assert response.status_code == 400
        data = response.json()["data"]
        assert list(data) == ["body"]


    def test_blank_name_uses_custom_validator(self, client, auth_headers):
        payload = {**VALID_BODY, "name": "   "}

        response = client.post("/v2/samples/echo", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert "Name must not be blank" in response.json()["data"]["name"][0]

    def test_never_returns_default_422(self, client, auth_headers):
        response = client.post("/v1/samples/echo", json={"quantity": "many"}, headers=auth_headers)

        assert response.status_code == 400
        assert "detail" not in response.json()
