from types import SimpleNamespace

import pytest

from app.ventura import llm_client
from app.ventura.models import AnalysisResult


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeLLM:
    """Stands in for ``openai.OpenAI``; replays queued replies in order."""

    def __init__(self) -> None:
        self.replies: list = []
        self.calls: list[dict] = []
        self.client_kwargs: list[dict] = []

    def queue(self, *replies) -> "FakeLLM":
        self.replies.extend(replies)
        return self

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if not self.replies:
            raise AssertionError("Unexpected LLM call with no queued reply.")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return completion(reply)

    def __call__(self, **kwargs):
        self.client_kwargs.append(kwargs)
        return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=self._create)))

    @property
    def last_user_content(self):
        messages = self.calls[-1]["messages"]
        return [m for m in messages if m["role"] == "user"][-1]["content"]


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setenv(llm_client.API_KEY_ENV, "test-key")
    monkeypatch.setattr(llm_client, "OpenAI", fake)
    return fake


@pytest.fixture
def no_api_key(monkeypatch):
    def _fail(**kwargs):
        raise AssertionError("OpenAI client must not be built without an API key.")

    monkeypatch.delenv(llm_client.API_KEY_ENV, raising=False)
    monkeypatch.setattr(llm_client, "OpenAI", _fail)


@pytest.fixture
def analysis():
    return AnalysisResult(
        score=82,
        company_name="Acme Robotics",
        summary="Warehouse picking robots sold as a service.",
        pros=["Strong founding team", "Recurring revenue"],
        cons=["Hardware margins", "Long sales cycles"],
        metrics={"marketSize": "$40B", "scalability": "High", "innovation": "Proprietary grippers"},
    )
