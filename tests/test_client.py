"""API client envelope handling, run against httpx.MockTransport."""

import json

import httpx
import pytest

from wellness.client import ApiError, WellnessClient, unwrap


BASE_URL = "http://wellness.test/api/v1"


def respond(status_code=200, body=None):
    return httpx.Response(status_code, json=body)


def make_client(handler, token=None):
    return WellnessClient(BASE_URL, token=token, transport=httpx.MockTransport(handler))


@pytest.mark.parametrize("body,expected", [
    ({"ok": True, "value": {"id": "1"}}, {"id": "1"}),
    ({"ok": True, "value": None}, None),
    ({"success": True, "data": [1, 2]}, [1, 2]),
    ({"success": True, "message": "Invitation sent"}, {"message": "Invitation sent"}),
    ([{"id": "1"}], [{"id": "1"}]),
    ({"id": "1", "name": "bare"}, {"id": "1", "name": "bare"}),
])
def test_unwrap_accepts_current_and_legacy_shapes(body, expected):
    assert unwrap(respond(200, body)) == expected


@pytest.mark.parametrize("status_code,body,code,message", [
    (200, {"ok": False, "error": {"code": 409, "message": "Conflict"}}, 409, "Conflict"),
    (200, {"success": False, "error": "Failed to fetch visits"}, 200, "Failed to fetch visits"),
    (404, {"ok": False, "error": {"code": 404, "message": "Visit not found"}}, 404, "Visit not found"),
    (401, {"error": "Unauthorized. Please sign in."}, 401, "Unauthorized. Please sign in."),
    (422, {"detail": "Bad payload"}, 422, "Bad payload"),
])
def test_unwrap_raises_api_error(status_code, body, code, message):
    with pytest.raises(ApiError) as exc_info:
        unwrap(respond(status_code, body))

    assert exc_info.value.status_code == code
    assert exc_info.value.message == message


def test_unwrap_non_json_failure():
    with pytest.raises(ApiError) as exc_info:
        unwrap(httpx.Response(502, text="Bad Gateway"))
    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Bad Gateway"


async def test_visit_listing_sends_only_set_filters():
    seen = {}

    def handler(request: httpx.Request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["auth"] = request.headers.get("authorization")
        return respond(200, {"ok": True, "value": {"visits": [], "pagination": {"total": 0, "page": 1, "limit": 10, "pages": 0}}})

    async with make_client(handler, token="abc") as client:
        result = await client.visits.list(status="scheduled", from_date="2025-01-01")

    assert result["visits"] == []
    assert seen["path"] == "/api/v1/visits"
    assert seen["params"] == {"page": "1", "limit": "10", "status": "scheduled", "from_date": "2025-01-01"}
    assert seen["auth"] == "Bearer abc"


async def test_record_responses_sends_answers_and_sections():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return respond(200, {"ok": True, "value": {"status": "in-progress"}})

    async with make_client(handler) as client:
        result = await client.visits.record_responses("v1", {"q1": "yes"}, [0])

    assert result == {"status": "in-progress"}
    assert (seen["method"], seen["path"]) == ("PUT", "/api/v1/visits/v1/responses")
    assert seen["body"] == {"responses": {"q1": "yes"}, "completed_sections": [0]}


async def test_login_stores_token_for_later_calls():
    auth_headers = []

    def handler(request: httpx.Request):
        auth_headers.append(request.headers.get("authorization"))
        if request.url.path.endswith("/auth/login"):
            return respond(200, {"ok": True, "value": {"access_token": "tok", "token_type": "bearer", "user": {}}})
        return respond(200, {"ok": True, "value": {"email": "admin@example.com"}})

    async with make_client(handler) as client:
        await client.login("admin@example.com", "Secret123")
        me = await client.users.me()

    assert me["email"] == "admin@example.com"
    assert auth_headers == [None, "Bearer tok"]


async def test_server_errors_surface_as_api_error():
    def handler(request: httpx.Request):
        return respond(409, {"ok": False, "error": {"code": 409, "message": "User with this email already exists"}})

    async with make_client(handler) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.users.invite("taken@example.com", "Taken", "staff")

    assert exc_info.value.status_code == 409
    assert "already exists" in str(exc_info.value)
