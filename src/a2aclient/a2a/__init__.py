"""A2A protocol client.

Implements the client side of the Google A2A protocol: agent card discovery,
synchronous message/send, and message/stream sessions bounded by a timeout.
"""

from a2aclient.a2a.gate import OneShotGate, StreamOutcome
from a2aclient.a2a.service import A2AClientConfig, AgentClientService
from a2aclient.a2a.transport import HttpTransport, Transport
from a2aclient.a2a.types import AgentCard, Message, Task, TaskState

__all__ = [
    "A2AClientConfig",
    "AgentCard",
    "AgentClientService",
    "HttpTransport",
    "Message",
    "OneShotGate",
    "StreamOutcome",
    "Task",
    "TaskState",
    "Transport",
]
