"""Unit tests for the streaming strategy assistant."""
import httpx
import openai
import pytest
from types import SimpleNamespace
from unittest.mock import Mock

from seo_grader.core.exceptions import ConfigurationError, ServiceUnavailableError
from seo_grader.models.analysis import ChatMessage
from seo_grader.models.metadata import VideoMetadata
from seo_grader.services.strategy_chat import StrategyChatService


def chunk(content):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class ChunkStream:
    """Iterable stream with a close method, like the SDK's Stream."""

    def __init__(self, items):
        self.items = items
        self.closed = False

    def __iter__(self):
        for item in self.items:
            if isinstance(item, Exception):
                raise item
            yield item

    def close(self):
        self.closed = True


class TestStrategyChatService:
    """Test message building and streaming."""

    @pytest.fixture
    def client(self):
        return Mock()

    @pytest.fixture
    def service(self, client):
        return StrategyChatService(client=client)

    @pytest.fixture
    def metadata(self):
        return VideoMetadata(title="My Video", description="desc", tags="cats")

    def test_build_messages(self, service, metadata, analysis):
        """Test the system instruction and role mapping."""
        history = [
            ChatMessage(role="user", text="Hi"),
            ChatMessage(role="model", text="Hello!"),
            ChatMessage(role="model", text=""),
        ]

        messages = service.build_messages(history, "What next?", metadata, analysis)

        assert messages[0]["role"] == "system"
        assert '"My Video"' in messages[0]["content"]
        assert "Score: 72." in messages[0]["content"]
        assert [(m["role"], m["content"]) for m in messages[1:]] == [
            ("user", "Hi"),
            ("assistant", "Hello!"),
            ("user", "What next?"),
        ]

    def test_build_messages_without_analysis(self, service, metadata):
        """Test the score is N/A before grading."""
        messages = service.build_messages([], "Hi", metadata, None)
        assert "Score: N/A." in messages[0]["content"]

    @pytest.mark.asyncio
    async def test_stream_reply(self, service, client, metadata):
        """Test deltas are yielded in order and empty chunks skipped."""
        client.chat.completions.create.return_value = iter([
            chunk("Use "), SimpleNamespace(choices=[]), chunk(None), chunk("chapters."),
        ])

        deltas = [delta async for delta in service.stream_reply([], "Help", metadata)]

        assert deltas == ["Use ", "chapters."]
        assert client.chat.completions.create.call_args.kwargs["stream"] is True

    @pytest.mark.asyncio
    async def test_stream_error(self, service, client, metadata):
        """Test SDK errors surface as SERVICE_UNAVAILABLE."""
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client.chat.completions.create.side_effect = openai.APIConnectionError(request=request)

        with pytest.raises(ServiceUnavailableError):
            [delta async for delta in service.stream_reply([], "Help", metadata)]

    @pytest.mark.asyncio
    async def test_stream_is_closed(self, service, client, metadata):
        """Test the stream is closed once fully read."""
        stream = ChunkStream([chunk("Use "), chunk("chapters.")])
        client.chat.completions.create.return_value = stream

        deltas = [delta async for delta in service.stream_reply([], "Help", metadata)]

        assert deltas == ["Use ", "chapters."]
        assert stream.closed is True

    @pytest.mark.asyncio
    async def test_unexpected_stream_error(self, service, client, metadata):
        """Test a non-SDK failure is logged as failed and closes the stream."""
        stream = ChunkStream([chunk("Use "), RuntimeError("decoder broke")])
        client.chat.completions.create.return_value = stream
        service.metrics = Mock()
        deltas = []

        with pytest.raises(RuntimeError):
            async for delta in service.stream_reply([], "Help", metadata):
                deltas.append(delta)

        assert deltas == ["Use "]
        assert stream.closed is True
        metrics = service.metrics.log_llm_call_metrics.call_args.kwargs
        assert metrics["success"] is False
        assert metrics["error_code"] == "UNEXPECTED_ERROR"

    @pytest.mark.asyncio
    async def test_early_exit_closes_stream(self, service, client, metadata):
        """Test a reader that stops early still releases the stream."""
        stream = ChunkStream([chunk("Use "), chunk("chapters.")])
        client.chat.completions.create.return_value = stream
        replies = service.stream_reply([], "Help", metadata)

        assert await replies.__anext__() == "Use "
        await replies.aclose()

        assert stream.closed is True

    @pytest.mark.asyncio
    async def test_not_configured(self, metadata, monkeypatch):
        """Test a missing API key."""
        monkeypatch.setattr("seo_grader.services.grading_service.settings.openai_api_key", "")
        service = StrategyChatService()

        with pytest.raises(ConfigurationError):
            [delta async for delta in service.stream_reply([], "Help", metadata)]
