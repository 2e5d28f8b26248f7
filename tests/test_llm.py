"""Tests for the LLM layer: model capability detection, Anthropic message split, factory."""

import pytest
from amaraday.llm import (
    AnthropicProvider,
    _build_completion_kwargs,
    _is_o_series,
    _make_client,
)


class TestOSeriesDetection:
    @pytest.mark.parametrize("model", ["o1", "o3-mini", "o4-mini", "azure/o1-preview", "gpt-5.1"])
    def test_reasoning_models(self, model):
        assert _is_o_series(model)

    @pytest.mark.parametrize("model", ["gpt-4o", "gpt-4o-mini", "claude-3-5-sonnet-20241022", "deepseek-chat"])
    def test_regular_models(self, model):
        assert not _is_o_series(model)


class TestCompletionKwargs:
    def test_regular_model(self):
        msgs = [{"role": "user", "content": "hi"}]
        kwargs = _build_completion_kwargs("gpt-4o", msgs, 0.7, 500)
        assert kwargs == {"model": "gpt-4o", "messages": msgs, "temperature": 0.7, "max_tokens": 500}

    def test_o_series_drops_temperature(self):
        kwargs = _build_completion_kwargs("o3-mini", [], 0.7, 500)
        assert "temperature" not in kwargs
        assert "max_tokens" not in kwargs
        assert kwargs["max_completion_tokens"] == 500


class TestAnthropicSplitSystem:
    def test_system_extracted(self):
        msgs = [
            {"role": "system", "content": "You are Amara Day."},
            {"role": "user", "content": "{}"},
        ]
        system, conversation = AnthropicProvider._split_system(msgs)
        assert system == "You are Amara Day."
        assert conversation == [{"role": "user", "content": "{}"}]

    def test_multiple_system_joined(self):
        msgs = [
            {"role": "system", "content": "A"},
            {"role": "system", "content": "B"},
            {"role": "user", "content": "hi"},
        ]
        system, conversation = AnthropicProvider._split_system(msgs)
        assert system == "A\nB"
        assert len(conversation) == 1

    def test_no_system(self):
        msgs = [{"role": "user", "content": "hi"}]
        system, conversation = AnthropicProvider._split_system(msgs)
        assert system == ""
        assert conversation == msgs


class TestMakeClient:
    def test_missing_key(self):
        with pytest.raises(ValueError, match="REFLECTION_API_KEY"):
            _make_client("anthropic", "", "claude-3-5-sonnet-20241022", "")

    def test_missing_model(self):
        with pytest.raises(ValueError, match="REFLECTION_MODEL"):
            _make_client("openai", "sk-test", "", "")

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider"):
            _make_client("mystery", "sk-test", "some-model", "")
