"""Unit tests for AI tournament description generation."""

from types import SimpleNamespace

import httpx
import pytest
from anthropic import APIConnectionError

from chessmate.config import settings
from chessmate.exceptions import DescriptionUnavailableError
from chessmate.services.descriptions import (
    AnthropicDescriptionGenerator,
    TournamentDescriptionInput,
    build_prompt,
    get_description_generator,
)

FACTS = TournamentDescriptionInput(
    tournament_name="Spring Open",
    tournament_type="Swiss",
    tournament_location="Town Hall",
    tournament_start_date="2026-05-01",
    tournament_end_date="2026-05-03",
    entry_fee=20,
    prize_fund=500,
    time_control="90+30",
)


class FakeMessages:
    def __init__(self, blocks=None, error=None):
        self.blocks = blocks or []
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=self.blocks)


def _generator(messages):
    return AnthropicDescriptionGenerator(
        api_key="test-key",
        model="test-model",
        max_tokens=100,
        client=SimpleNamespace(messages=messages),
    )


def test_prompt_contains_the_facts():
    prompt = build_prompt(FACTS)
    assert "Tournament Name: Spring Open" in prompt
    assert "Time Control: 90+30" in prompt


def test_accepts_camel_case_input():
    facts = TournamentDescriptionInput.model_validate({
        "tournamentName": "Blitz Night",
        "tournamentType": "Arena",
        "tournamentLocation": "Cafe",
        "tournamentStartDate": "2026-06-01",
        "tournamentEndDate": "2026-06-01",
        "entryFee": 5,
        "prizeFund": 50,
        "timeControl": "3+2",
    })
    assert facts.tournament_name == "Blitz Night"


def test_generate_returns_text():
    messages = FakeMessages(blocks=[
        SimpleNamespace(type="text", text="  Join the Spring Open! "),
    ])
    assert _generator(messages).generate(FACTS) == "Join the Spring Open!"

    call = messages.calls[0]
    assert call["model"] == "test-model"
    assert call["max_tokens"] == 100
    assert "Spring Open" in call["messages"][0]["content"]


def test_empty_reply_is_unavailable():
    with pytest.raises(DescriptionUnavailableError):
        _generator(FakeMessages(blocks=[])).generate(FACTS)


def test_api_error_is_unavailable():
    error = APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))
    with pytest.raises(DescriptionUnavailableError):
        _generator(FakeMessages(error=error)).generate(FACTS)


def test_dependency_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "anthropic_api_key", None)
    with pytest.raises(DescriptionUnavailableError):
        get_description_generator()


def test_dependency_builds_generator(monkeypatch):
    monkeypatch.setattr(settings, "anthropic_api_key", "test-key")
    assert isinstance(get_description_generator(), AnthropicDescriptionGenerator)
