"""Client service for a remote A2A agent.

Wraps a :class:`~a2aclient.a2a.transport.Transport` with request construction,
a completion policy over streamed events, and a one-shot gate that turns the
transport's callbacks into a blocking call bounded by a timeout.
"""

import logging
import uuid
from collections.abc import Callable

from pydantic import BaseModel

from a2aclient.a2a import observers
from a2aclient.a2a.gate import OneShotGate, StreamOutcome
from a2aclient.a2a.transport import ErrorHandler, EventHandler, FailureHandler, HttpTransport, Transport
from a2aclient.a2a.types import (
    TERMINAL_FAILURE_STATES,
    TERMINAL_SUCCESS_STATES,
    AgentCard,
    JSONRPCError,
    MessageSendConfiguration,
    MessageSendParams,
    SendMessageResponse,
    StreamingEvent,
    Task,
    TaskStatusUpdateEvent,
    user_message,
)

logger = logging.getLogger("a2a_client")


class A2AClientConfig(BaseModel):
    """Configuration for talking to a remote A2A agent."""

    url: str = "http://localhost:9090/a2a"
    """JSON-RPC endpoint of the agent"""
    card_path: str = "/a2a/.well-known/agent.json"
    """Path of the agent card, resolved against ``url``"""
    timeout: float = 30.0
    """Timeout for HTTP requests in seconds"""
    streaming_timeout: float = 60.0
    """How long a streaming call waits for the session to conclude, in seconds"""
    accepted_output_modes: list[str] = ["text"]
    """Output modalities the client accepts"""
    blocking: bool = False
    """Ask the agent for non-blocking semantics (only honoured when streaming)"""
    conclude_on_terminal_failure: bool = False
    """Also end a streaming wait when a task reaches failed, canceled or rejected"""


def new_identity(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4()}"


class AgentClientService:
    """Send messages to one agent, synchronously or as a bounded streaming session."""

    def __init__(
        self,
        config: A2AClientConfig | None = None,
        *,
        transport: Transport | None = None,
        id_factory: Callable[[str], str] = new_identity,
    ):
        self.config = config or A2AClientConfig()
        self.transport = transport or HttpTransport(self.config.url, timeout=self.config.timeout)
        self.id_factory = id_factory

    def build_message_send_params(self, text: str) -> MessageSendParams:
        """Wrap ``text`` in a user message tagged with a fresh task and context id."""
        message = user_message(
            text,
            taskId=self.id_factory("task"),
            contextId=self.id_factory("context"),
        )
        configuration = MessageSendConfiguration(
            acceptedOutputModes=list(self.config.accepted_output_modes),
            blocking=self.config.blocking,
        )
        return MessageSendParams(message=message, configuration=configuration)

    def fetch_agent_card(self, parameters: dict[str, str] | None = None) -> AgentCard:
        logger.info(f"Fetching agent card from path: {self.config.card_path}")
        agent_card = self.transport.get_agent_card(self.config.card_path, parameters or {})
        logger.info(f"Agent card retrieved: {agent_card.name} ({agent_card.url})")
        return agent_card

    def send_message(self, text: str) -> SendMessageResponse:
        """Send ``text`` and block for the single result.

        The response is returned untouched; a task result additionally has its
        artifacts logged.
        """
        params = self.build_message_send_params(text)
        logger.info(f"Sending non-streaming message: {text}")
        response = self.transport.send_message(params)
        logger.info(f"Received response: {response.result!r}")

        if isinstance(response.result, Task):
            task = response.result
            logger.info(f"Task ID: {task.id}, Status: {task.status.state.value}")
            observers.log_artifacts(task.artifacts)
        else:
            logger.info(f"Received non-task response: {response.result!r}")
        return response

    def concludes_session(self, event: StreamingEvent) -> bool:
        """Whether ``event`` on its own ends a streaming session."""
        if not isinstance(event, (Task, TaskStatusUpdateEvent)):
            return False
        state = event.status.state
        if state in TERMINAL_SUCCESS_STATES:
            return True
        return self.config.conclude_on_terminal_failure and state in TERMINAL_FAILURE_STATES

    def send_streaming_message(
        self,
        text: str,
        *,
        on_event: EventHandler | None = None,
        on_error: ErrorHandler | None = None,
        on_failure: FailureHandler | None = None,
        timeout: float | None = None,
    ) -> bool:
        """Send ``text`` and wait for the streaming session to conclude.

        Handlers that are not given fall back to the logging observers in
        :mod:`a2aclient.a2a.observers`. Every delivery reaches its handler
        first; the wait ends on the first terminal event, protocol error or
        connection failure.

        Returns:
            True if the session concluded (successfully or not) before
            ``timeout`` seconds, False if it timed out.
        """
        on_event = on_event or observers.log_event
        on_error = on_error or observers.log_error
        on_failure = on_failure or observers.log_failure
        timeout = self.config.streaming_timeout if timeout is None else timeout

        params = self.build_message_send_params(text)
        gate = OneShotGate()

        def wrapped_event_handler(event: StreamingEvent) -> None:
            try:
                on_event(event)
            finally:
                if self.concludes_session(event):
                    gate.signal(StreamOutcome.success)

        def wrapped_error_handler(error: JSONRPCError) -> None:
            try:
                on_error(error)
            finally:
                gate.signal(StreamOutcome.error)

        def wrapped_failure_handler() -> None:
            try:
                on_failure()
            finally:
                gate.signal(StreamOutcome.failure)

        logger.info(f"Sending streaming message: {text}")
        self.transport.send_streaming_message(
            params, wrapped_event_handler, wrapped_error_handler, wrapped_failure_handler
        )

        logger.info("Listening for streaming events...")
        completed = gate.wait(timeout)
        if completed:
            logger.info(f"Streaming session completed ({gate.outcome.value})")
        else:
            logger.info(f"Streaming session timed out after {timeout} seconds")
        return completed

    def close(self):
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
