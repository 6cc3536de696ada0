"""Transport to a remote A2A agent: agent card lookup, JSON-RPC calls and SSE streaming."""

import logging
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol
from urllib.parse import urljoin

import httpx
from pydantic import ValidationError

from a2aclient.a2a.types import (
    SEND_MESSAGE,
    SEND_STREAMING_MESSAGE,
    AgentCard,
    JSONRPCError,
    JSONRPCRequest,
    JSONRPCResponse,
    MessageSendParams,
    SendMessageResponse,
    StreamingEvent,
    streaming_event_adapter,
)
from a2aclient.exceptions import TransportError

EventHandler = Callable[[StreamingEvent], None]
ErrorHandler = Callable[[JSONRPCError], None]
FailureHandler = Callable[[], None]


class Transport(Protocol):
    """What the client service needs from a connection to an agent."""

    def get_agent_card(self, path: str, parameters: dict[str, str] | None = None) -> AgentCard: ...

    def send_message(self, params: MessageSendParams) -> SendMessageResponse: ...

    def send_streaming_message(
        self,
        params: MessageSendParams,
        on_event: EventHandler,
        on_error: ErrorHandler,
        on_failure: FailureHandler,
    ) -> Future | None:
        """Register the callbacks and return immediately.

        The callbacks may be invoked from any thread, any number of times.
        """
        ...

    def close(self) -> None: ...


def iter_sse_data(lines: Iterable[str]) -> Iterator[str]:
    """Yield the data payload of every server-sent event in ``lines``."""
    data: list[str] = []
    for line in lines:
        if not line:
            if data:
                yield "\n".join(data)
                data = []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if field == "data":
            data.append(value[1:] if value.startswith(" ") else value)
    if data:
        yield "\n".join(data)


class HttpTransport:
    """JSON-RPC over HTTP transport, with Server-Sent Events for streaming.

    Streaming sessions are read on a worker pool, so callbacks run on the
    pool's threads and never on the caller's.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        max_workers: int = 4,
        client: httpx.Client | None = None,
    ):
        self.url = url
        self.logger = logging.getLogger("a2a_transport")
        if client is None:
            client = httpx.Client(timeout=timeout, headers=self._get_headers())
        self.client = client
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="a2a-stream")

    def _get_headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def _rpc_payload(self, method: str, params: MessageSendParams) -> dict:
        request = JSONRPCRequest(method=method, params=params.model_dump(mode="json", exclude_none=True))
        return request.model_dump(mode="json")

    def get_agent_card(self, path: str, parameters: dict[str, str] | None = None) -> AgentCard:
        """Fetch the agent card published at ``path`` relative to the agent URL."""
        card_url = urljoin(self.url, path)
        try:
            response = self.client.get(card_url, params=parameters or None)
            response.raise_for_status()
            return AgentCard.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            self.logger.error(f"Agent card request to {card_url} failed: {e}")
            raise TransportError(
                f"Failed to fetch agent card: {e}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            self.logger.error(f"Agent card request to {card_url} failed: {e}")
            raise TransportError(f"Failed to fetch agent card: {e}") from e
        except ValueError as e:
            raise TransportError(f"Malformed agent card from {card_url}: {e}") from e

    def send_message(self, params: MessageSendParams) -> SendMessageResponse:
        """Blocking ``message/send`` round trip.

        Returns:
            The JSON-RPC response as is, including any protocol error it carries.
        """
        try:
            response = self.client.post(self.url, json=self._rpc_payload(SEND_MESSAGE, params))
            response.raise_for_status()
            return SendMessageResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            self.logger.error(f"message/send failed: {e}")
            raise TransportError(f"A2A message/send failed: {e}", status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            self.logger.error(f"message/send failed: {e}")
            raise TransportError(f"A2A message/send failed: {e}") from e
        except ValueError as e:
            raise TransportError(f"Malformed message/send response: {e}") from e

    def send_streaming_message(
        self,
        params: MessageSendParams,
        on_event: EventHandler,
        on_error: ErrorHandler,
        on_failure: FailureHandler,
    ) -> Future:
        """Start a ``message/stream`` session in the background.

        A callback that raises is logged and the stream keeps being read, so
        later events still reach the caller.

        Returns:
            Future of the reader.
        """
        payload = self._rpc_payload(SEND_STREAMING_MESSAGE, params)
        future = self._executor.submit(self._read_stream, payload, on_event, on_error, on_failure)
        future.add_done_callback(self._log_reader_exception)
        return future

    def _log_reader_exception(self, future: Future) -> None:
        if future.cancelled() or future.exception() is None:
            return
        self.logger.error("Streaming reader stopped", exc_info=future.exception())

    def _deliver(self, callback: Callable, *args) -> None:
        try:
            callback(*args)
        except Exception:
            self.logger.exception(f"Streaming callback {getattr(callback, '__name__', callback)} raised")

    def _dispatch(self, data: str | bytes, on_event: EventHandler, on_error: ErrorHandler) -> bool:
        """Decode one JSON-RPC response and hand it to its callback.

        Returns:
            False if ``data`` could not be decoded at all.
        """
        try:
            rpc = JSONRPCResponse.model_validate_json(data)
            event = None if rpc.error else streaming_event_adapter.validate_python(rpc.result)
        except ValidationError as e:
            self.logger.error(f"Undecodable streaming event: {e}")
            return False
        if rpc.error is not None:
            self._deliver(on_error, rpc.error)
        else:
            self._deliver(on_event, event)
        return True

    def _read_stream(
        self,
        payload: dict,
        on_event: EventHandler,
        on_error: ErrorHandler,
        on_failure: FailureHandler,
    ) -> None:
        try:
            with self.client.stream(
                "POST", self.url, json=payload, headers={"Accept": "text/event-stream"}
            ) as response:
                response.raise_for_status()
                if not response.headers.get("content-type", "").startswith("text/event-stream"):
                    # Agents may reject the request with a plain JSON-RPC response.
                    if not self._dispatch(response.read(), on_event, on_error):
                        self._deliver(on_failure)
                    return
                for data in iter_sse_data(response.iter_lines()):
                    if not self._dispatch(data, on_event, on_error):
                        self._deliver(on_failure)
                        return
        except httpx.HTTPError as e:
            self.logger.warning(f"Streaming connection failed: {e}")
            self._deliver(on_failure)

    def close(self):
        """Stop accepting streaming sessions and close the HTTP client."""
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
