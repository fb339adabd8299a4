from types import SimpleNamespace

import anthropic
import httpx
import pytest

from app.exceptions import ServiceUnavailableError
from app.services.claude_client import NOT_CONFIGURED_MESSAGE, ClaudeClient


class FakeMessages:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def text_response(*texts):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=text) for text in texts],
        stop_reason="end_turn",
    )


@pytest.fixture
def fake_messages(monkeypatch):
    messages = FakeMessages(response=text_response("Translated text."))
    constructed = []

    def fake_client(**kwargs):
        constructed.append(kwargs)
        return SimpleNamespace(messages=messages)

    monkeypatch.setattr(anthropic, "AsyncAnthropic", fake_client)
    messages.constructed = constructed
    return messages


@pytest.mark.asyncio
async def test_complete_sends_system_and_user_prompts(fake_messages):
    client = ClaudeClient(api_key="sk-test", model="claude-test")

    result = await client.complete("system prompt", "user text", max_output_tokens=4096)

    assert result == "Translated text."
    request = fake_messages.requests[0]
    assert request["model"] == "claude-test"
    assert request["system"] == "system prompt"
    assert request["messages"] == [{"role": "user", "content": "user text"}]
    assert request["max_tokens"] == 4096
    assert request["temperature"] == 0.7
    assert fake_messages.constructed[0]["api_key"] == "sk-test"


@pytest.mark.asyncio
async def test_deterministic_requests_use_zero_temperature(fake_messages):
    client = ClaudeClient(api_key="sk-test")

    await client.complete("system", "user", deterministic=True, max_output_tokens=100)

    assert fake_messages.requests[0]["temperature"] == 0.0


@pytest.mark.asyncio
async def test_text_blocks_are_joined_and_other_blocks_ignored(fake_messages):
    fake_messages.response = SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text="Part one. "),
            SimpleNamespace(type="tool_use", name="lookup"),
            SimpleNamespace(type="text", text="Part two."),
        ],
        stop_reason="end_turn",
    )
    client = ClaudeClient(api_key="sk-test")

    assert await client.complete("system", "user", max_output_tokens=100) == "Part one. Part two."


@pytest.mark.asyncio
async def test_unconfigured_client_fails_without_calling_provider(fake_messages):
    client = ClaudeClient(api_key="")

    assert client.is_configured is False
    with pytest.raises(ServiceUnavailableError) as excinfo:
        await client.complete("system", "user", max_output_tokens=100)

    assert excinfo.value.message == NOT_CONFIGURED_MESSAGE
    assert fake_messages.constructed == []


@pytest.mark.asyncio
async def test_provider_errors_become_service_unavailable(fake_messages):
    fake_messages.error = anthropic.APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )
    client = ClaudeClient(api_key="sk-test")

    with pytest.raises(ServiceUnavailableError) as excinfo:
        await client.complete("system", "user", max_output_tokens=100)

    assert excinfo.value.status_code == 503
    assert isinstance(excinfo.value.__cause__, anthropic.APIConnectionError)


@pytest.mark.asyncio
async def test_empty_reply_is_treated_as_unavailable(fake_messages):
    fake_messages.response = SimpleNamespace(content=[], stop_reason="max_tokens")
    client = ClaudeClient(api_key="sk-test")

    with pytest.raises(ServiceUnavailableError):
        await client.complete("system", "user", max_output_tokens=100)


def test_client_is_created_once(fake_messages):
    client = ClaudeClient(api_key="sk-test")

    assert client.client is client.client
    assert len(fake_messages.constructed) == 1
