"""Tests for the LLM client and the enrichment client.

LLM calls are mocked since we don't have API keys in CI.
"""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import anthropic
import httpx
import pytest

from namaste_translate.config import settings
from namaste_translate.services import llm_client
from namaste_translate.services.enrichment import (
    MSG_ERROR,
    MSG_INVALID_JSON,
    MSG_INVALID_SHAPE,
    MSG_NO_KEY,
    MSG_TIMEOUT,
    EnrichmentClient,
    build_user_message,
    parse_drug_information,
)
from namaste_translate.services.llm_client import extract_json, load_prompt

VALID_PAYLOAD = {
    "condition": "Prameha",
    "drugs": [
        {
            "name": "Chandraprabha Vati",
            "form": "Tablet",
            "uses": "Urinary disorders",
            "modern_equivalent": "Metformin",
            "modern_classification": "Biguanide",
        },
        {
            "name": "Nisha Amalaki",
            "form": "Churna",
            "uses": "Glycaemic control",
            "modern_equivalent": "Acarbose",
            "modern_classification": "Alpha-glucosidase inhibitor",
        },
    ],
}


class TestExtractJson:
    def test_raw_json(self):
        text = json.dumps(VALID_PAYLOAD)
        assert extract_json(text) == VALID_PAYLOAD

    def test_surrounding_whitespace(self):
        assert extract_json('\n  {"a": 1}  \n') == {"a": 1}

    def test_json_with_preamble(self):
        text = 'Here is the output:\n{"condition": "Jvara", "drugs": []}\nHope this helps.'
        assert extract_json(text) == {"condition": "Jvara", "drugs": []}

    def test_code_fence(self):
        text = '```json\n{"key": "value"}\n```'
        assert extract_json(text) == {"key": "value"}

    def test_nested_json(self):
        text = 'x {"outer": {"inner": [1, 2, 3]}, "flag": true} y'
        result = extract_json(text)
        assert result["outer"]["inner"] == [1, 2, 3]

    def test_braces_inside_strings(self):
        text = 'note: {"uses": "reduces {kapha}", "n": 1} end'
        assert extract_json(text) == {"uses": "reduces {kapha}", "n": 1}

    def test_escaped_quotes(self):
        text = 'out: {"text": "He said \\"hello\\"", "count": 1}'
        assert extract_json(text)["count"] == 1

    def test_first_object_wins(self):
        assert extract_json('First: {"a": 1} Second: {"b": 2}') == {"a": 1}

    def test_no_json(self):
        assert extract_json("This is just plain text with no JSON.") is None

    def test_json_array_ignored(self):
        assert extract_json("[1, 2, 3]") is None

    def test_malformed_json(self):
        assert extract_json('{"key": "value", "broken"}') is None

    def test_unbalanced(self):
        assert extract_json('{"key": {"value": 1}') is None


class TestLoadPrompt:
    def test_load_drug_information(self):
        prompt = load_prompt("drug_information")
        assert "JSON" in prompt
        assert "modern_equivalent" in prompt
        assert "3-6" in prompt

    def test_load_nonexistent_raises(self):
        with pytest.raises(FileNotFoundError):
            load_prompt("nonexistent_prompt")


class TestParseDrugInformation:
    def test_valid(self):
        result = parse_drug_information(json.dumps(VALID_PAYLOAD))
        assert result.structured is True
        assert result.payload.drugs[0].modern_equivalent == "Metformin"
        assert result.response_data() == VALID_PAYLOAD

    def test_valid_after_repair(self):
        result = parse_drug_information("Sure! " + json.dumps(VALID_PAYLOAD) + " Thanks.")
        assert result.structured is True

    def test_not_json(self):
        result = parse_drug_information("I cannot answer that.")
        assert result.structured is False
        assert result.diagnostic == MSG_INVALID_JSON

    def test_empty(self):
        assert parse_drug_information("").diagnostic == MSG_INVALID_JSON

    def test_wrong_shape(self):
        result = parse_drug_information('{"condition": "Prameha", "medicines": []}')
        assert result.structured is False
        assert result.diagnostic == MSG_INVALID_SHAPE

    def test_empty_drug_list(self):
        result = parse_drug_information('{"condition": "Prameha", "drugs": []}')
        assert result.diagnostic == MSG_INVALID_SHAPE


class TestEnrichmentClient:
    @pytest.fixture
    def with_key(self, monkeypatch):
        monkeypatch.setattr(settings, "anthropic_api_key", "test-key")

    @pytest.mark.asyncio
    async def test_no_key(self, monkeypatch):
        monkeypatch.setattr(settings, "anthropic_api_key", "")
        with patch("namaste_translate.services.enrichment.call_model", new_callable=AsyncMock) as mock:
            result = await EnrichmentClient().fetch_drug_info("Prameha")
        assert result.structured is False
        assert result.response_data() == [{"message": MSG_NO_KEY}]
        mock.assert_not_called()

    @pytest.mark.asyncio
    async def test_success(self, with_key):
        with patch("namaste_translate.services.enrichment.call_model",
                   new_callable=AsyncMock, return_value=json.dumps(VALID_PAYLOAD)) as mock:
            result = await EnrichmentClient().fetch_drug_info("Prameha")
        assert result.structured is True
        assert result.payload.condition == "Prameha"
        mock.assert_awaited_once()
        system, user_message = mock.await_args.args
        assert "STRICT JSON" in system
        assert user_message == build_user_message("Prameha")

    @pytest.mark.asyncio
    async def test_service_error(self, with_key):
        with patch("namaste_translate.services.enrichment.call_model",
                   new_callable=AsyncMock, side_effect=RuntimeError("boom")):
            result = await EnrichmentClient().fetch_drug_info("Prameha")
        assert result.structured is False
        assert result.diagnostic == MSG_ERROR

    @pytest.mark.asyncio
    async def test_timeout(self, with_key):
        with patch("namaste_translate.services.enrichment.call_model",
                   new_callable=AsyncMock, side_effect=TimeoutError("slow")):
            result = await EnrichmentClient().fetch_drug_info("Prameha")
        assert result.diagnostic == MSG_TIMEOUT

    @pytest.mark.asyncio
    async def test_unparsable(self, with_key):
        with patch("namaste_translate.services.enrichment.call_model",
                   new_callable=AsyncMock, return_value="no json here"):
            result = await EnrichmentClient().fetch_drug_info("Prameha")
        assert result.diagnostic == MSG_INVALID_JSON


class TestCallModel:
    @staticmethod
    def _client(create):
        return SimpleNamespace(messages=SimpleNamespace(create=create))

    @pytest.mark.asyncio
    async def test_returns_text(self):
        async def create(**kwargs):
            assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
            return SimpleNamespace(
                content=[SimpleNamespace(text='{"a": 1}')],
                usage=SimpleNamespace(input_tokens=5, output_tokens=7),
            )

        with patch.object(llm_client, "_get_client", return_value=self._client(create)):
            text = await llm_client.call_model("system", "hi")
        assert text == '{"a": 1}'

    @pytest.mark.asyncio
    async def test_hard_timeout(self, monkeypatch):
        async def create(**kwargs):
            await asyncio.sleep(5)

        monkeypatch.setattr(settings, "enrichment_timeout_seconds", 0)
        with patch.object(llm_client, "_get_client", return_value=self._client(create)):
            with pytest.raises(TimeoutError):
                await llm_client.call_model("system", "hi")

    @pytest.mark.asyncio
    async def test_sdk_timeout_is_a_timeout(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")

        async def create(**kwargs):
            raise anthropic.APITimeoutError(request=request)

        with patch.object(llm_client, "_get_client", return_value=self._client(create)):
            with pytest.raises(TimeoutError):
                await llm_client.call_model("system", "hi")

    @pytest.mark.asyncio
    async def test_sdk_timeout_reported_as_timeout(self, monkeypatch):
        monkeypatch.setattr(settings, "anthropic_api_key", "test-key")
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")

        async def create(**kwargs):
            raise anthropic.APITimeoutError(request=request)

        with patch.object(llm_client, "_get_client", return_value=self._client(create)):
            result = await EnrichmentClient().fetch_drug_info("Prameha")
        assert result.diagnostic == MSG_TIMEOUT

    def test_transport_timeout_above_hard_limit(self, monkeypatch):
        monkeypatch.setattr(llm_client, "_client", None)
        monkeypatch.setattr(settings, "anthropic_api_key", "test-key")
        client = llm_client._get_client()
        assert client.timeout.read > settings.enrichment_timeout_seconds
        assert client.max_retries == 0
