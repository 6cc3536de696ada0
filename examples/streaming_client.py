"""Follow a streaming session with custom handlers.

Collects the text of every artifact chunk while the default observer still
logs each event. Point it at any A2A agent that supports message/stream:

    A2A_AGENT_URL=http://localhost:9090/a2a python examples/streaming_client.py "tell me a story about cats"
"""

import logging
import os
import sys

from a2aclient.a2a import A2AClientConfig, AgentClientService
from a2aclient.a2a.observers import log_event
from a2aclient.a2a.types import TaskArtifactUpdateEvent, TextPart

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

chunks: list[str] = []


def collect(event):
    log_event(event)
    if isinstance(event, TaskArtifactUpdateEvent):
        chunks.extend(part.text for part in event.artifact.parts if isinstance(part, TextPart))


def main():
    config = A2AClientConfig(
        url=os.getenv("A2A_AGENT_URL", "http://localhost:9090/a2a"),
        conclude_on_terminal_failure=True,
    )
    text = sys.argv[1] if len(sys.argv) > 1 else "tell me a story about cats"
    with AgentClientService(config) as service:
        completed = service.send_streaming_message(text, on_event=collect, timeout=30)
    print("".join(chunks) if completed else "Timed out waiting for the agent")
    return 0 if completed else 1


if __name__ == "__main__":
    sys.exit(main())
