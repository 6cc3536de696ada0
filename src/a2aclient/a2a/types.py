"""A2A protocol data types (Google A2A spec, JSON-RPC binding)."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter


def _new_id() -> str:
    return str(uuid.uuid4())


# === Parts ===

class TextPart(BaseModel):
    kind: Literal["text"] = "text"
    text: str
    metadata: dict[str, Any] | None = None


class FileContent(BaseModel):
    name: str | None = None
    mimeType: str | None = None
    bytes: str | None = None
    """Base64 encoded file content."""
    uri: str | None = None


class FilePart(BaseModel):
    kind: Literal["file"] = "file"
    file: FileContent
    metadata: dict[str, Any] | None = None


class DataPart(BaseModel):
    kind: Literal["data"] = "data"
    data: dict[str, Any]
    metadata: dict[str, Any] | None = None


class UnknownPart(BaseModel):
    """Any part whose kind this client does not know about."""

    model_config = ConfigDict(extra="allow")

    kind: str


# Tried in order, so the known kinds win over the catch-all.
Part = Annotated[TextPart | FilePart | DataPart | UnknownPart, Field(union_mode="left_to_right")]


# === Messages ===

class Role(str, Enum):
    user = "user"
    agent = "agent"


class Message(BaseModel):
    kind: Literal["message"] = "message"
    messageId: str = Field(default_factory=_new_id)
    role: Role
    parts: list[Part]
    taskId: str | None = None
    contextId: str | None = None
    metadata: dict[str, Any] | None = None


def user_message(text: str, **kwargs: Any) -> Message:
    """Wrap plain text into a user-authored message with a single text part."""
    return Message(role=Role.user, parts=[TextPart(text=text)], **kwargs)


# === Task ===

class TaskState(str, Enum):
    submitted = "submitted"
    working = "working"
    input_required = "input-required"
    completed = "completed"
    canceled = "canceled"
    failed = "failed"
    rejected = "rejected"
    auth_required = "auth-required"
    unknown = "unknown"


TERMINAL_SUCCESS_STATES = frozenset({TaskState.completed})
TERMINAL_FAILURE_STATES = frozenset({TaskState.failed, TaskState.canceled, TaskState.rejected})


class TaskStatus(BaseModel):
    state: TaskState
    message: Message | None = None
    timestamp: str | None = None


class Artifact(BaseModel):
    artifactId: str = Field(default_factory=_new_id)
    name: str | None = None
    description: str | None = None
    parts: list[Part]
    metadata: dict[str, Any] | None = None


class Task(BaseModel):
    kind: Literal["task"] = "task"
    id: str = Field(default_factory=_new_id)
    contextId: str | None = None
    status: TaskStatus
    artifacts: list[Artifact] = []
    history: list[Message] = []
    metadata: dict[str, Any] = {}


# === Streaming events ===

class TaskStatusUpdateEvent(BaseModel):
    kind: Literal["status-update"] = "status-update"
    taskId: str
    contextId: str | None = None
    status: TaskStatus
    final: bool = False
    metadata: dict[str, Any] | None = None


class TaskArtifactUpdateEvent(BaseModel):
    kind: Literal["artifact-update"] = "artifact-update"
    taskId: str
    contextId: str | None = None
    artifact: Artifact
    append: bool = False
    """True: add these parts to the artifact delivered before. False: this artifact replaces it."""
    lastChunk: bool = False
    metadata: dict[str, Any] | None = None


class UnknownEvent(BaseModel):
    """Any streaming event whose kind this client does not know about."""

    model_config = ConfigDict(extra="allow")

    kind: str


_EVENT_KINDS = frozenset({"message", "task", "status-update", "artifact-update"})


def _event_kind(value: Any) -> str | None:
    kind = value.get("kind") if isinstance(value, dict) else getattr(value, "kind", None)
    if not isinstance(kind, str):
        return None
    return kind if kind in _EVENT_KINDS else "unknown"


StreamingEvent = Annotated[
    Union[
        Annotated[Message, Tag("message")],
        Annotated[Task, Tag("task")],
        Annotated[TaskStatusUpdateEvent, Tag("status-update")],
        Annotated[TaskArtifactUpdateEvent, Tag("artifact-update")],
        Annotated[UnknownEvent, Tag("unknown")],
    ],
    Discriminator(_event_kind),
]
streaming_event_adapter: TypeAdapter[StreamingEvent] = TypeAdapter(StreamingEvent)


# === Send parameters ===

class MessageSendConfiguration(BaseModel):
    acceptedOutputModes: list[str] = ["text"]
    blocking: bool = False


class MessageSendParams(BaseModel):
    message: Message
    configuration: MessageSendConfiguration | None = None
    metadata: dict[str, Any] | None = None


# === JSON-RPC ===

class JSONRPCError(BaseModel):
    code: int
    message: str
    data: Any | None = None


class JSONRPCRequest(BaseModel):
    jsonrpc: str = "2.0"
    id: str | int | None = Field(default_factory=_new_id)
    method: str
    params: dict[str, Any] | None = None


class JSONRPCResponse(BaseModel):
    jsonrpc: str = "2.0"
    id: str | int | None = None
    result: Any | None = None
    error: JSONRPCError | None = None


class SendMessageResponse(JSONRPCResponse):
    result: Annotated[Task | Message, Field(discriminator="kind")] | None = None


# === Agent Card ===

class AgentSkill(BaseModel):
    id: str
    name: str
    description: str = ""
    tags: list[str] = []
    examples: list[str] = []


class AgentCapabilities(BaseModel):
    streaming: bool = False
    pushNotifications: bool = False
    stateTransitionHistory: bool = False


class AgentProvider(BaseModel):
    organization: str
    url: str = ""


class AgentCard(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    name: str
    description: str = ""
    url: str
    version: str = ""
    capabilities: AgentCapabilities = AgentCapabilities()
    skills: list[AgentSkill] = []
    provider: AgentProvider | None = None
    documentationUrl: str | None = None
    defaultInputModes: list[str] = ["text"]
    defaultOutputModes: list[str] = ["text"]


# Methods
SEND_MESSAGE = "message/send"
SEND_STREAMING_MESSAGE = "message/stream"

# Error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
TASK_NOT_FOUND = -32001
TASK_NOT_CANCELABLE = -32002
UNSUPPORTED_OPERATION = -32004
