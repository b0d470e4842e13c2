"""
Unit tests for the text generator: backend selection, timeouts and fallback.
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from people_finder.agent import llm
from people_finder.core.errors import GenerationTimeoutError, GenerationUnavailableError


def _gemini_response(status_code: int = 200, text: str = "Alice fits best.") -> MagicMock:
    response = MagicMock(status_code=status_code, text="error body")
    response.json.return_value = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return response


class TestGenerationStatus:
    """Tests for generation_status()."""

    def test_unconfigured(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", ""), patch.object(llm, "OPENAI_API_KEY", ""):
            status = llm.generation_status()
        assert status["available"] is False
        assert status["backend"] is None

    def test_placeholder_key_is_not_configured(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", llm.GEMINI_API_KEY_PLACEHOLDER), patch.object(llm, "OPENAI_API_KEY", ""):
            assert llm.is_gemini_configured() is False
            status = llm.generation_status()
        assert status["available"] is False
        assert "placeholder" in status["message"]

    def test_gemini_preferred(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", "g-key"), patch.object(llm, "OPENAI_API_KEY", "o-key"):
            assert llm.generation_status()["backend"] == "gemini"


class TestGenerate:
    """Tests for generate()."""

    def test_no_backend_raises(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", ""), patch.object(llm, "OPENAI_API_KEY", ""):
            with pytest.raises(GenerationUnavailableError):
                llm.generate("prompt")

    def test_gemini_success(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", "g-key"), patch.object(llm, "OPENAI_API_KEY", ""), patch(
            "people_finder.agent.llm.httpx.Client"
        ) as client_cls:
            client = client_cls.return_value.__enter__.return_value
            client.post.return_value = _gemini_response()
            out = llm.generate("prompt", timeout=5.0)
        assert out == "Alice fits best."
        client_cls.assert_called_once_with(timeout=5.0)
        _, kwargs = client.post.call_args
        assert kwargs["headers"]["x-goog-api-key"] == "g-key"
        assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "prompt"

    def test_gemini_timeout_raises_without_fallback(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", "g-key"), patch.object(llm, "OPENAI_API_KEY", "o-key"), patch(
            "people_finder.agent.llm.httpx.Client"
        ) as client_cls, patch.object(llm, "_call_openai") as call_openai:
            client_cls.return_value.__enter__.return_value.post.side_effect = httpx.TimeoutException("slow")
            with pytest.raises(GenerationTimeoutError):
                llm.generate("prompt")
        call_openai.assert_not_called()

    def test_gemini_error_falls_back_to_openai(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", "g-key"), patch.object(llm, "OPENAI_API_KEY", "o-key"), patch(
            "people_finder.agent.llm.httpx.Client"
        ) as client_cls, patch.object(llm, "_call_openai", return_value="From OpenAI.") as call_openai:
            client_cls.return_value.__enter__.return_value.post.return_value = _gemini_response(status_code=500)
            out = llm.generate("prompt")
        assert out == "From OpenAI."
        call_openai.assert_called_once()

    def test_unreadable_gemini_body_falls_back_to_openai(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", "g-key"), patch.object(llm, "OPENAI_API_KEY", "o-key"), patch(
            "people_finder.agent.llm.httpx.Client"
        ) as client_cls, patch.object(llm, "_call_openai", return_value="From OpenAI."):
            response = _gemini_response()
            response.json.side_effect = ValueError("not json")
            client_cls.return_value.__enter__.return_value.post.return_value = response
            assert llm.generate("prompt") == "From OpenAI."

    def test_non_object_gemini_body_is_unavailable(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", "g-key"), patch.object(llm, "OPENAI_API_KEY", ""), patch(
            "people_finder.agent.llm.httpx.Client"
        ) as client_cls:
            response = _gemini_response()
            response.json.return_value = ["not", "an", "object"]
            client_cls.return_value.__enter__.return_value.post.return_value = response
            with pytest.raises(GenerationUnavailableError):
                llm.generate("prompt")

    def test_gemini_error_without_fallback_raises(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", "g-key"), patch.object(llm, "OPENAI_API_KEY", ""), patch(
            "people_finder.agent.llm.httpx.Client"
        ) as client_cls:
            client_cls.return_value.__enter__.return_value.post.return_value = _gemini_response(status_code=403)
            with pytest.raises(GenerationUnavailableError):
                llm.generate("prompt")

    def test_empty_text_raises(self) -> None:
        with patch.object(llm, "GEMINI_API_KEY", "g-key"), patch.object(llm, "OPENAI_API_KEY", ""), patch(
            "people_finder.agent.llm.httpx.Client"
        ) as client_cls:
            client_cls.return_value.__enter__.return_value.post.return_value = _gemini_response(text="  ")
            with pytest.raises(GenerationUnavailableError):
                llm.generate("prompt")
