"""Tests for prompt assembly and the generation clients."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from robin.agent.discussion import ConversationTurn
from robin.agent.generations import (
    GenerationsAPIClient,
    OpenAIGenerationClient,
    create_generator,
    decode_generation_text,
)
from robin.agent.prompts import build_discussion_prompt, build_user_prompt, render_transcript
from robin.utils.config import GenerationConfig


def _client_for(handler) -> GenerationsAPIClient:
    return GenerationsAPIClient(
        url="https://gen.example.com/v1/generate",
        api_key="secret",
        model="command",
        max_tokens=120,
        transport=httpx.MockTransport(handler),
    )


def _generation_config(**overrides) -> GenerationConfig:
    values = dict(
        provider="generations",
        url="https://gen.example.com/v1/generate",
        api_key=None,
        model="command",
        max_tokens=300,
        timeout_seconds=60.0,
        openai_api_key=None,
        openai_model="gpt-4o-mini",
    )
    values.update(overrides)
    return GenerationConfig(**values)


class TestDecodeGenerationText:
    def test_url_decoding(self) -> None:
        assert decode_generation_text("Tom%27s%20answer") == "Tom's answer"

    def test_html_entities(self) -> None:
        text = "&lt;b&gt;Tom&#39;s &quot;fix&quot; &amp; more&lt;/b&gt;"
        assert decode_generation_text(text) == '<b>Tom\'s "fix" & more</b>'

    def test_ampersand_is_decoded_once(self) -> None:
        assert decode_generation_text("&amp;lt;") == "&lt;"

    @pytest.mark.parametrize(
        "text",
        ["Tom's answer", "plain words", "a < b > c & \"d\"", "100% sure", ""],
    )
    def test_idempotent_on_decoded_text(self, text: str) -> None:
        assert decode_generation_text(text) == text
        assert decode_generation_text(decode_generation_text(text)) == text


class TestPrompts:
    def test_user_prompt_embeds_inputs(self) -> None:
        prompt = build_user_prompt("Who owns billing?", '{"team": "billing"}')

        assert 'Your knowledge and expertise is: {"team": "billing"}.' in prompt
        assert "Someone asked: Who owns billing?." in prompt
        assert "I don't have information about that in my knowledge base" in prompt

    def test_user_prompt_is_deterministic(self) -> None:
        assert build_user_prompt("q", "k") == build_user_prompt("q", "k")

    def test_render_transcript(self) -> None:
        turns = [
            ConversationTurn("Jane", "Ship it Friday.", 1),
            ConversationTurn("Raj", "Tests first.", 1),
        ]

        assert render_transcript(turns) == "Jane said: Ship it Friday.\nRaj said: Tests first."
        assert render_transcript([]) == ""

    def test_discussion_prompt_embeds_inputs(self) -> None:
        turns = (ConversationTurn("Jane", "Ship it Friday.", 1),)

        prompt = build_discussion_prompt("Release plan", "knows QA", turns)

        assert "The user's knowledge base is: knows QA." in prompt
        assert "The conversation so far is: Jane said: Ship it Friday.." in prompt
        assert "The agenda of the discussion is: Release plan." in prompt
        assert "less than 50 words" in prompt
        assert prompt == build_discussion_prompt("Release plan", "knows QA", list(turns))


@pytest.mark.asyncio
class TestGenerationsAPIClient:
    async def test_returns_decoded_first_generation(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"generations": [{"text": "Tom%27s%20answer"}, {"text": "ignored"}]},
            )

        answer = await _client_for(handler).generate("the prompt")

        assert answer == "Tom's answer"
        assert seen["auth"] == "Bearer secret"
        assert seen["body"] == {"prompt": "the prompt", "max_tokens": 120, "model": "command"}

    async def test_missing_text_returns_none(self) -> None:
        client = _client_for(lambda request: httpx.Response(200, json={"generations": []}))
        assert await client.generate("p") is None

        client = _client_for(lambda request: httpx.Response(200, json={"generations": [{}]}))
        assert await client.generate("p") is None

        client = _client_for(lambda request: httpx.Response(200, json={"unexpected": True}))
        assert await client.generate("p") is None

    async def test_error_status_propagates(self) -> None:
        client = _client_for(lambda request: httpx.Response(503, text="overloaded"))

        with pytest.raises(httpx.HTTPStatusError):
            await client.generate("p")

    async def test_transport_error_propagates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(httpx.ConnectError):
            await _client_for(handler).generate("p")

    async def test_no_auth_header_without_key(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"generations": [{"text": "ok"}]})

        client = GenerationsAPIClient(
            url="https://gen.example.com/v1/generate",
            transport=httpx.MockTransport(handler),
        )

        assert await client.generate("p") == "ok"
        assert seen["auth"] is None


@pytest.mark.asyncio
class TestOpenAIGenerationClient:
    async def test_decodes_completion(self) -> None:
        openai = MagicMock()
        openai.chat.completions.create = AsyncMock(
            return_value=SimpleNamespace(
                choices=[SimpleNamespace(message=SimpleNamespace(content="It&#39;s done"))]
            )
        )
        client = OpenAIGenerationClient(api_key="sk-test", model="gpt-4o-mini", client=openai)

        assert await client.generate("p") == "It's done"
        kwargs = openai.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "p"}]

    async def test_errors_propagate(self) -> None:
        openai = MagicMock()
        openai.chat.completions.create = AsyncMock(side_effect=RuntimeError("rate limited"))
        client = OpenAIGenerationClient(api_key="sk-test", model="gpt-4o-mini", client=openai)

        with pytest.raises(RuntimeError, match="rate limited"):
            await client.generate("p")


class TestCreateGenerator:
    def test_default_provider(self) -> None:
        generator = create_generator(_generation_config(api_key="k"))

        assert isinstance(generator, GenerationsAPIClient)
        assert generator.api_key == "k"

    def test_openai_requires_key(self) -> None:
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            create_generator(_generation_config(provider="openai"))

    def test_openai_provider(self) -> None:
        generator = create_generator(
            _generation_config(provider="openai", openai_api_key="sk-test")
        )

        assert isinstance(generator, OpenAIGenerationClient)
        assert generator.model == "gpt-4o-mini"
