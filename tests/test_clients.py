import asyncio
import json

import httpx
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

import api_client
from api_client import transport
from shared.ai_client import AIBackendError, AssistantClient


@pytest.fixture
def recorded():
    """Route httpx through a mock transport and record requests."""
    calls = []
    responses = {}

    def handler(request):
        calls.append(request)
        status, payload = responses.get((request.method, request.url.path), (200, {}))
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    api_client.configure(base_url="http://dottie.test", token="tok-123", transport=httpx.MockTransport(handler))
    yield calls, responses
    api_client.configure()


def test_get_list_hits_list_endpoint_with_token(recorded):
    calls, responses = recorded
    responses[("GET", "/api/assessment/list")] = (200, [{"id": "a1"}])

    result = asyncio.run(api_client.get_list())

    assert result == [{"id": "a1"}]
    assert calls[0].headers["Authorization"] == "Bearer tok-123"


def test_send_and_update_wrap_payload(recorded):
    calls, responses = recorded
    responses[("POST", "/api/assessment/send")] = (201, {"id": "a1"})
    responses[("PUT", "/api/assessment/a1")] = (200, {"id": "a1"})

    asyncio.run(api_client.send_assessment({"age": "18-24"}))
    asyncio.run(api_client.update("a1", {"age": "25-29"}))

    assert json.loads(calls[0].content) == {"assessment_data": {"age": "18-24"}}
    assert json.loads(calls[1].content) == {"assessment_data": {"age": "25-29"}}


def test_delete_handles_no_content(recorded):
    calls, responses = recorded
    responses[("DELETE", "/api/assessment/a1")] = (204, None)
    responses[("DELETE", "/api/chat/history/c1")] = (204, None)

    assert asyncio.run(api_client.delete_assessment("a1")) is True
    assert asyncio.run(api_client.delete_conversation("c1")) is True


def test_errors_raise_api_error(recorded):
    _, responses = recorded
    responses[("GET", "/api/assessment/missing")] = (404, {"error": True, "message": "Assessment not found"})

    with pytest.raises(api_client.ApiError) as excinfo:
        asyncio.run(api_client.get_by_id("missing"))

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Assessment not found"


def test_chat_wrappers(recorded):
    calls, responses = recorded
    responses[("POST", "/api/chat/send")] = (200, {"conversation_id": "c1", "message": {"content": "hi"}})
    responses[("GET", "/api/chat/history")] = (200, {"conversations": [{"id": "c1", "preview": "hi"}]})
    responses[("GET", "/api/chat/history/c1")] = (200, {"id": "c1", "messages": []})

    sent = asyncio.run(api_client.send_message("hello", "c1"))
    history = asyncio.run(api_client.get_history())
    conversation = asyncio.run(api_client.get_conversation("c1"))

    assert json.loads(calls[0].content) == {"message": "hello", "conversation_id": "c1"}
    assert sent["conversation_id"] == "c1"
    assert history == [{"id": "c1", "preview": "hi"}]
    assert conversation["id"] == "c1"


def test_send_message_without_conversation_omits_id(recorded):
    calls, _ = recorded
    asyncio.run(api_client.send_message("hello"))
    assert json.loads(calls[0].content) == {"message": "hello"}


def test_legacy_objects_expose_same_functions():
    assert api_client.assessment_api.list is api_client.get_list
    assert api_client.assessment_api.delete is api_client.delete_assessment
    assert api_client.chat_api.get_history is api_client.get_history


def test_base_url_from_environment(monkeypatch):
    api_client.configure()
    monkeypatch.setenv("API_BASE_URL", "https://api.dottie.example/")
    assert transport.get_base_url() == "https://api.dottie.example/api"


def _run_with_assistant_server(status, payload, messages, response=None):
    received = []

    async def handle_chat(request):
        received.append(await request.json())
        if response is not None:
            return response()
        return web.json_response(payload, status=status)

    async def scenario():
        app = web.Application()
        app.router.add_post("/api/chat", handle_chat)
        async with TestServer(app) as server:
            client = AssistantClient(str(server.make_url("/")))
            return await client.generate_reply(messages, {"pain_level": "mild"})

    return asyncio.run(scenario()), received


def test_assistant_client_posts_history():
    messages = [{"id": "m1", "role": "user", "content": "hello", "created_at": "t"}]

    reply, received = _run_with_assistant_server(200, {"reply": "hi there"}, messages)

    assert reply == "hi there"
    assert received == [{
        "messages": [{"role": "user", "content": "hello"}],
        "assessment": {"pain_level": "mild"},
    }]


def test_assistant_client_raises_on_error_status():
    with pytest.raises(AIBackendError):
        _run_with_assistant_server(500, {"error": "boom"}, [])


def test_assistant_client_requires_url(monkeypatch):
    monkeypatch.delenv("AI_BACKEND_URL", raising=False)
    with pytest.raises(ValueError):
        AssistantClient()


def test_assistant_client_html_error_body_raises_backend_error():
    html = lambda: web.Response(text="<html>Bad Gateway</html>", status=502, content_type="text/html")

    with pytest.raises(AIBackendError, match="Bad Gateway"):
        _run_with_assistant_server(502, None, [], response=html)


def test_assistant_client_invalid_json_on_success_raises_backend_error():
    plain = lambda: web.Response(text="not json", status=200, content_type="text/plain")

    with pytest.raises(AIBackendError):
        _run_with_assistant_server(200, None, [], response=plain)


def test_assistant_client_unreachable_host_raises_backend_error():
    client = AssistantClient("http://127.0.0.1:9")

    with pytest.raises(AIBackendError, match="unreachable"):
        asyncio.run(client.generate_reply([{"role": "user", "content": "hi"}]))
