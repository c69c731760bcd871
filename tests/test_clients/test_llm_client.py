"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from jobtrack.clients.llm_client import LLMClient, LLMResponse


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(text=text)]
    return message


def _client_returning(mock_cls, *messages_or_errors) -> MagicMock:
    mock_client = MagicMock()
    mock_client.messages.create = AsyncMock(side_effect=list(messages_or_errors))
    mock_cls.return_value = mock_client
    return mock_client


class TestLLMClientInit:
    def test_init_default_creates_client_with_no_kwargs(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with()

    def test_init_with_api_key_and_timeout(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key", timeout=30.0)
            mock_cls.assert_called_once_with(api_key="test-key", timeout=30.0)


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _client_returning(mock_cls, _make_api_message("hello world", 100, 50))
            llm = LLMClient()
            result = await llm.generate("say hello")

        assert isinstance(result, LLMResponse)
        assert result.text == "hello world"
        assert result.input_tokens == 100
        assert result.output_tokens == 50

    async def test_system_prompt_is_forwarded(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            client = _client_returning(mock_cls, _make_api_message("ok"))
            llm = LLMClient()
            await llm.generate("prompt", system="be terse", temperature=0.2, model="m")

        kwargs = client.messages.create.await_args.kwargs
        assert kwargs["system"] == "be terse"
        assert kwargs["temperature"] == 0.2
        assert kwargs["model"] == "m"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    async def test_transient_failure_is_retried(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            client = _client_returning(
                mock_cls, RuntimeError("overloaded"), _make_api_message("recovered")
            )
            llm = LLMClient(max_retries=3)
            result = await llm.generate("prompt")

        assert result.text == "recovered"
        assert client.messages.create.await_count == 2

    async def test_failure_is_reraised_after_last_attempt(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _client_returning(mock_cls, RuntimeError("down"))
            llm = LLMClient(max_retries=1)
            with pytest.raises(RuntimeError, match="down"):
                await llm.generate("prompt")
        assert llm._token_log == []

    async def test_token_log_stores_model_and_counts(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _client_returning(
                mock_cls,
                _make_api_message("a", input_tokens=20, output_tokens=8),
                _make_api_message("b", input_tokens=10, output_tokens=5),
            )
            llm = LLMClient()
            await llm.generate("one", model="claude-sonnet-4-5-20250929")
            await llm.generate("two", model="claude-sonnet-4-5-20250929")

        assert llm._token_log == [
            ("claude-sonnet-4-5-20250929", 20, 8),
            ("claude-sonnet-4-5-20250929", 10, 5),
        ]


class TestLLMClientGenerateJson:
    async def test_generate_json_parses_fenced_json(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _client_returning(
                mock_cls, _make_api_message('Sure:\n```json\n{"key": "value", "count": 3}\n```')
            )
            llm = LLMClient()
            result = await llm.generate_json("give me json")

        assert result == {"key": "value", "count": 3}

    async def test_generate_json_raises_on_non_json_response(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _client_returning(mock_cls, _make_api_message("this is plain text, not json"))
            llm = LLMClient()
            with pytest.raises(ValueError):
                await llm.generate_json("give me json")


class TestLLMClientTokenSummary:
    def test_get_token_summary_returns_totals_and_clears(self):
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic"):
            llm = LLMClient()
        llm._token_log = [
            ("claude-sonnet-4-5-20250929", 100, 50),
            ("claude-sonnet-4-5-20250929", 200, 80),
        ]

        summary = llm.get_token_summary()

        assert summary["input"] == 300
        assert summary["output"] == 130
        assert len(summary["calls"]) == 2
        assert llm.get_token_summary() == {"input": 0, "output": 0, "calls": []}


class TestLLMClientEmptyResponse:
    async def test_no_content_blocks_raises_value_error(self):
        message = _make_api_message("unused", input_tokens=30, output_tokens=0)
        message.content = []
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _client_returning(mock_cls, message)
            llm = LLMClient()
            with pytest.raises(ValueError, match="no text content"):
                await llm.generate("prompt")

        assert llm._token_log == [("claude-sonnet-4-5-20250929", 30, 0)]

    async def test_skips_non_text_blocks(self):
        message = _make_api_message("unused")
        message.content = [object(), MagicMock(text='{"ok": true}')]
        with patch("jobtrack.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _client_returning(mock_cls, message)
            llm = LLMClient()
            assert await llm.generate_json("prompt") == {"ok": True}
