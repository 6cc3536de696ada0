"""Tests for the a2a-client command line."""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from a2aclient import package_dir
from a2aclient.a2a.types import AgentCard, JSONRPCError, SendMessageResponse
from a2aclient.exceptions import TransportError
from a2aclient.run.a2a import DEFAULT_TEXT, app, load_config

runner = CliRunner()


@pytest.fixture()
def service():
    with patch("a2aclient.run.a2a.AgentClientService") as mock_service_class:
        mock_service = MagicMock()
        mock_service_class.return_value.__enter__.return_value = mock_service
        mock_service.service_class = mock_service_class
        yield mock_service


def test_default_config_file():
    config = load_config(package_dir / "config" / "default.yaml")
    assert config.url == "http://localhost:9090/a2a"
    assert config.card_path == "/a2a/.well-known/agent.json"
    assert config.streaming_timeout == 60.0


def test_load_config_overrides(tmp_path):
    config_file = tmp_path / "client.yaml"
    config_file.write_text("client:\n  url: http://a:1/a2a\n  streaming_timeout: 5\n")
    config = load_config(config_file, url="http://b:2/a2a", card_path="/card.json")
    assert config.url == "http://b:2/a2a"
    assert config.card_path == "/card.json"
    assert config.streaming_timeout == 5.0


def test_missing_config_file(tmp_path, service):
    result = runner.invoke(app, ["--config", str(tmp_path / "missing.yaml"), "card"])
    assert result.exit_code == 1


def test_card(service):
    service.fetch_agent_card.return_value = AgentCard(name="story-agent", url="http://localhost:9090/a2a")
    result = runner.invoke(app, ["--url", "http://agent:8000/a2a", "card"])
    assert result.exit_code == 0
    assert "story-agent" in result.output
    config = service.service_class.call_args.args[0]
    assert config.url == "http://agent:8000/a2a"


def test_card_transport_error(service):
    service.fetch_agent_card.side_effect = TransportError("unreachable")
    result = runner.invoke(app, ["card"])
    assert result.exit_code == 1


def test_send(service):
    service.send_message.return_value = SendMessageResponse(id=1, result=None)
    result = runner.invoke(app, ["send", "hello"])
    assert result.exit_code == 0
    service.send_message.assert_called_once_with("hello")


def test_send_protocol_error(service):
    service.send_message.return_value = SendMessageResponse(
        id=1, error=JSONRPCError(code=-32603, message="Internal error")
    )
    result = runner.invoke(app, ["send", "hello"])
    assert result.exit_code == 1


def test_stream_completed(service):
    service.send_streaming_message.return_value = True
    result = runner.invoke(app, ["stream", "hello", "--timeout", "5"])
    assert result.exit_code == 0
    service.send_streaming_message.assert_called_once_with("hello", timeout=5.0)


def test_stream_timed_out(service):
    service.send_streaming_message.return_value = False
    result = runner.invoke(app, ["stream"])
    assert result.exit_code == 1
    service.send_streaming_message.assert_called_once_with(DEFAULT_TEXT, timeout=None)


def test_run_sequence(service):
    service.send_streaming_message.return_value = True
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 0
    service.fetch_agent_card.assert_called_once_with()
    service.send_message.assert_called_once_with(DEFAULT_TEXT)
    service.send_streaming_message.assert_called_once_with(DEFAULT_TEXT)


def test_run_stops_on_transport_error(service):
    service.fetch_agent_card.side_effect = TransportError("unreachable")
    result = runner.invoke(app, ["run"])
    assert result.exit_code == 1
    service.send_message.assert_not_called()
