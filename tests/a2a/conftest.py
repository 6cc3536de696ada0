import threading

import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, StreamingResponse
from starlette.routing import Route

AGENT_CARD = {
    "name": "story-agent",
    "description": "Tells stories",
    "url": "http://testserver/a2a",
    "version": "1.0.0",
    "capabilities": {"streaming": True},
    "skills": [{"id": "stories", "name": "Stories", "description": "Tell a story"}],
}


class FakeTransport:
    """In-memory transport that delivers a scripted stream from its own thread."""

    def __init__(self, script=(), response=None, card=None):
        self.script = list(script)
        self.response = response
        self.card = card
        self.sent = []
        self.card_requests = []
        self.threads = []
        self.callback_errors = []
        self.closed = False

    def get_agent_card(self, path, parameters=None):
        self.card_requests.append((path, parameters))
        if isinstance(self.card, Exception):
            raise self.card
        return self.card

    def send_message(self, params):
        self.sent.append(params)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    def send_streaming_message(self, params, on_event, on_error, on_failure):
        self.sent.append(params)

        def deliver():
            for channel, payload in self.script:
                try:
                    if channel == "event":
                        on_event(payload)
                    elif channel == "error":
                        on_error(payload)
                    else:
                        on_failure()
                except Exception as e:
                    self.callback_errors.append(e)

        thread = threading.Thread(target=deliver)
        self.threads.append(thread)
        thread.start()

    def join(self):
        for thread in self.threads:
            thread.join(timeout=5)

    def close(self):
        self.closed = True


@pytest.fixture()
def fake_transport():
    return FakeTransport


def make_agent_app(stream_frames=(), send_result=None, stream_json=None) -> Starlette:
    """Minimal A2A agent: an agent card plus message/send and message/stream."""
    received = []

    async def agent_card(request: Request) -> JSONResponse:
        received.append({"card_params": dict(request.query_params)})
        return JSONResponse(AGENT_CARD)

    async def jsonrpc(request: Request):
        body = await request.json()
        received.append(body)
        if body["method"] == "message/send":
            return JSONResponse({"jsonrpc": "2.0", "id": body["id"], "result": send_result})
        if body["method"] == "message/stream":
            if stream_json is not None:
                return JSONResponse({"jsonrpc": "2.0", "id": body["id"], **stream_json})

            async def frames():
                for frame in stream_frames:
                    yield frame

            return StreamingResponse(frames(), media_type="text/event-stream")
        return JSONResponse(
            {"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": "Unknown method"}}
        )

    app = Starlette(
        routes=[
            Route("/a2a/.well-known/agent.json", agent_card, methods=["GET"]),
            Route("/a2a", jsonrpc, methods=["POST"]),
        ],
    )
    app.state.received = received
    return app


@pytest.fixture()
def agent_app_factory():
    return make_agent_app
