"""Default observers for streaming sessions and helpers that render parts to the log."""

import json
import logging

from a2aclient.a2a.types import (
    TERMINAL_SUCCESS_STATES,
    Artifact,
    DataPart,
    FilePart,
    JSONRPCError,
    Message,
    Part,
    StreamingEvent,
    Task,
    TaskArtifactUpdateEvent,
    TaskStatusUpdateEvent,
    TextPart,
    UnknownEvent,
)

logger = logging.getLogger("a2a_client")


def render_part(part: Part) -> str:
    if isinstance(part, TextPart):
        return f"Text: {part.text}"
    if isinstance(part, DataPart):
        return f"Data: {json.dumps(part.data, separators=(',', ':'), default=str)}"
    if isinstance(part, FilePart):
        return f"File: {part.file.name}"
    return f"Unknown part kind: {getattr(part, 'kind', type(part).__name__)}"


def log_parts(parts: list[Part]) -> None:
    for part in parts:
        logger.info(render_part(part))


def log_artifacts(artifacts: list[Artifact]) -> None:
    if not artifacts:
        logger.info("No artifacts available.")
        return
    for artifact in artifacts:
        logger.info(f"Artifact ID: {artifact.artifactId}")
        log_parts(artifact.parts)


def log_event(event: StreamingEvent) -> None:
    """Log a streaming event according to its variant."""
    logger.info(f"Received event: {type(event).__name__}")
    if isinstance(event, Message):
        logger.info(f"Message ID: {event.messageId}")
        log_parts(event.parts)
    elif isinstance(event, Task):
        logger.info(f"Task ID: {event.id}, Status: {event.status.state.value}")
        if event.status.state in TERMINAL_SUCCESS_STATES:
            log_artifacts(event.artifacts)
    elif isinstance(event, TaskStatusUpdateEvent):
        logger.info(f"Task status updated to: {event.status.state.value}")
    elif isinstance(event, TaskArtifactUpdateEvent):
        logger.info("New artifact received:")
        log_artifacts([event.artifact])
    elif isinstance(event, UnknownEvent):
        logger.info(f"Received unknown event kind: {event.kind}")


def log_error(error: JSONRPCError) -> None:
    logger.error(f"Error. message={error.message}, code={error.code}")
    if error.data is not None:
        logger.error(f"Error data: {error.data}")


def log_failure() -> None:
    logger.error("Connection failed or interrupted")
