"""
tests for the gemini client, with the http session replaced
"""

import sys
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).parent))

from src.templa.llm_service import GeminiLLMService, LLMServiceError


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body or {}
        self.text = str(self.body)

    def json(self):
        return self.body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, params=None, json=None, timeout=None):
        self.requests.append({"url": url, "params": params, "json": json, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": params})
        if self.error:
            raise self.error
        return self.response


def candidate(*texts):
    return {"candidates": [{"content": {"parts": [{"text": text} for text in texts]}}]}


def make_service(session):
    service = GeminiLLMService(api_key="test-key", model="gemini-test", base_url="http://gemini.local/v1/", timeout=5)
    service.session = session
    return service


def test_missing_api_key():
    with pytest.raises(ValueError):
        GeminiLLMService(api_key="")


def test_generate_text_request_and_reply():
    session = FakeSession(FakeResponse(body=candidate("Hello ", "world ")))
    service = make_service(session)

    assert service.generate_text("Hi", system_instruction="Be brief", temperature=0.2) == "Hello world"

    request = session.requests[0]
    assert request["url"] == "http://gemini.local/v1/models/gemini-test:generateContent"
    assert request["params"] == {"key": "test-key"}
    assert request["timeout"] == 5
    assert request["json"]["contents"][0]["parts"][0]["text"] == "Hi"
    assert request["json"]["systemInstruction"] == {"parts": [{"text": "Be brief"}]}
    assert request["json"]["generationConfig"]["temperature"] == 0.2
    assert "responseMimeType" not in request["json"]["generationConfig"]


def test_generate_text_with_schema():
    session = FakeSession(FakeResponse(body=candidate('{"sections": []}')))
    schema = {"type": "OBJECT"}
    make_service(session).generate_text("outline", response_schema=schema)

    config = session.requests[0]["json"]["generationConfig"]
    assert config["responseMimeType"] == "application/json"
    assert config["responseSchema"] == schema


@pytest.mark.parametrize("response", [
    FakeResponse(status_code=500, body={"error": "boom"}),
    FakeResponse(body={"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}}),
    FakeResponse(body=candidate("   ")),
])
def test_generate_text_errors(response):
    with pytest.raises(LLMServiceError):
        make_service(FakeSession(response)).generate_text("Hi")


def test_generate_text_network_errors():
    with pytest.raises(LLMServiceError):
        make_service(FakeSession(error=requests.exceptions.Timeout())).generate_text("Hi")
    with pytest.raises(LLMServiceError):
        make_service(FakeSession(error=requests.exceptions.ConnectionError("refused"))).generate_text("Hi")


def test_connection_check():
    models = {"models": [{"name": "models/gemini-test"}, {"name": "models/other"}]}
    service = make_service(FakeSession(FakeResponse(body=models)))
    assert service.list_models() == ["models/gemini-test", "models/other"]
    assert service.test_connection() is True

    service.model = "missing-model"
    assert service.test_connection() is False

    assert make_service(FakeSession(FakeResponse(status_code=403))).test_connection() is False
