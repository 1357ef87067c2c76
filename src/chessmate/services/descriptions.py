"""
AI-written tournament descriptions.

Organizers fill in the tournament facts; the model returns a short,
engaging description for the listing page. Generation goes through the
Anthropic Messages API. Any failure is raised as
DescriptionUnavailableError so the form can fall back to manual entry.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from anthropic import Anthropic, APIError
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chessmate.config import settings
from chessmate.exceptions import DescriptionUnavailableError

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are an expert in writing engaging and informative descriptions for chess tournaments.

Using the information provided below, generate a compelling description to attract more players.
Reply with the description only.

Tournament Name: {tournament_name}
Tournament Type: {tournament_type}
Location: {tournament_location}
Start Date: {tournament_start_date}
End Date: {tournament_end_date}
Entry Fee: {entry_fee}
Prize Fund: {prize_fund}
Time Control: {time_control}
"""


class TournamentDescriptionInput(BaseModel):
    """Facts the description is written from."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tournament_name: str = Field(..., min_length=1)
    tournament_type: str
    tournament_location: str
    tournament_start_date: str
    tournament_end_date: str
    entry_fee: float = Field(..., ge=0)
    prize_fund: float = Field(..., ge=0)
    time_control: str


class DescriptionGenerator(Protocol):
    def generate(self, facts: TournamentDescriptionInput) -> str:
        ...


def build_prompt(facts: TournamentDescriptionInput) -> str:
    return PROMPT_TEMPLATE.format(**facts.model_dump())


class AnthropicDescriptionGenerator:
    """Claude-backed description writer."""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        client: Optional[Anthropic] = None,
    ):
        self.model = model or settings.anthropic_model
        self.max_tokens = max_tokens or settings.anthropic_max_tokens
        self._client = client or Anthropic(api_key=api_key)

    def generate(self, facts: TournamentDescriptionInput) -> str:
        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": build_prompt(facts)}],
            )
        except APIError as exc:
            logger.error("Description generation failed for %s: %s", facts.tournament_name, exc)
            raise DescriptionUnavailableError("The description service failed; try again later") from exc

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        ).strip()
        if not text:
            raise DescriptionUnavailableError("The description service returned no text")
        return text


def get_description_generator() -> DescriptionGenerator:
    """FastAPI dependency; fails when no API key is configured."""
    if not settings.anthropic_api_key:
        raise DescriptionUnavailableError(
            "Description generation is not configured (set ANTHROPIC_API_KEY)"
        )
    return AnthropicDescriptionGenerator(api_key=settings.anthropic_api_key)
