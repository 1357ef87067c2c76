"""
API schemas (Pydantic).

Every model reads and writes camelCase JSON (tournamentId, playerScores,
...) while Python code uses snake_case attribute names.
"""

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from chessmate.results.scores import InvalidScoreError, PlayerScore, TournamentResult, normalize_score
from chessmate.results.standings import Standing

TournamentType = Literal["Swiss", "Round Robin", "Knockout", "Arena", "Scheveningen", "Other"]
TournamentStatus = Literal["Upcoming", "Active", "Completed", "Cancelled"]
BlogCategory = Literal[
    "Tournament News", "Game Analysis", "Chess Tips", "Community Spotlight", "General"
]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Tournaments
# =============================================================================

class TournamentCreate(CamelModel):
    """Request schema for creating a tournament."""
    name: str = Field(..., min_length=3, max_length=100)
    type: TournamentType
    location: str = Field(..., min_length=3, max_length=100)
    start_date: datetime
    end_date: datetime
    entry_fee: float = Field(..., ge=0)
    prize_fund: float = Field(..., ge=0)
    time_control: str = Field(..., min_length=3, max_length=50)
    description: str = Field(..., min_length=10, max_length=2000)
    image_url: Optional[str] = Field(default=None, max_length=500)
    total_rounds: int = Field(default=0, ge=0)


class TournamentUpdate(CamelModel):
    """Partial update; only fields present in the body are applied."""
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    type: Optional[TournamentType] = None
    location: Optional[str] = Field(default=None, min_length=3, max_length=100)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    entry_fee: Optional[float] = Field(default=None, ge=0)
    prize_fund: Optional[float] = Field(default=None, ge=0)
    time_control: Optional[str] = Field(default=None, min_length=3, max_length=50)
    description: Optional[str] = Field(default=None, min_length=10, max_length=2000)
    image_url: Optional[str] = Field(default=None, max_length=500)
    total_rounds: Optional[int] = Field(default=None, ge=0)
    status: Optional[TournamentStatus] = None


class TournamentResponse(CamelModel):
    id: str
    name: str
    type: str
    location: str
    start_date: datetime
    end_date: datetime
    entry_fee: float
    prize_fund: float
    time_control: str
    description: str
    image_url: Optional[str] = None
    total_rounds: int
    status: str


# =============================================================================
# Registrations
# =============================================================================

class RegistrationCreate(CamelModel):
    tournament_id: str = Field(..., min_length=1)
    tournament_name: Optional[str] = None
    player_name: str = Field(..., min_length=1, max_length=255)
    player_email: Optional[str] = Field(default=None, max_length=255)
    gender: Optional[str] = Field(default=None, max_length=20)
    dob: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    organization: Optional[str] = Field(default=None, max_length=255)
    mobile: Optional[str] = Field(default=None, max_length=30)
    fide_rating: Optional[int] = Field(default=None, ge=0)
    fide_id: Optional[str] = Field(default=None, max_length=20)
    fee_paid: bool = False


class RegistrationUpdate(CamelModel):
    player_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    player_email: Optional[str] = Field(default=None, max_length=255)
    gender: Optional[str] = Field(default=None, max_length=20)
    dob: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    organization: Optional[str] = Field(default=None, max_length=255)
    mobile: Optional[str] = Field(default=None, max_length=30)
    fide_rating: Optional[int] = Field(default=None, ge=0)
    fide_id: Optional[str] = Field(default=None, max_length=20)
    fee_paid: Optional[bool] = None


class RegistrationResponse(CamelModel):
    id: str
    tournament_id: str
    tournament_name: str
    player_name: str
    player_email: Optional[str] = None
    registration_date: datetime
    fee_paid: bool
    gender: Optional[str] = None
    dob: Optional[str] = None
    organization: Optional[str] = None
    mobile: Optional[str] = None
    fide_rating: int
    fide_id: str


# =============================================================================
# Results
# =============================================================================

ScoreValue = Union[float, None]


class PlayerScoreIn(CamelModel):
    """Incoming score row; totalScore is accepted but always recomputed."""
    player_id: str = Field(..., min_length=1)
    player_name: str = ""
    rating: Optional[int] = None
    round_scores: List[ScoreValue] = Field(default_factory=list)
    total_score: Optional[float] = None

    @field_validator("round_scores")
    @classmethod
    def validate_round_scores(cls, v: List[ScoreValue]) -> List[ScoreValue]:
        try:
            return [normalize_score(s) for s in v]
        except InvalidScoreError as exc:
            raise ValueError(str(exc)) from exc

    def to_player_score(self) -> PlayerScore:
        return PlayerScore(
            player_id=self.player_id,
            player_name=self.player_name,
            rating=self.rating,
            round_scores=tuple(self.round_scores),
        )


class TournamentResultIn(CamelModel):
    tournament_id: str = Field(..., min_length=1)
    player_scores: List[PlayerScoreIn] = Field(default_factory=list)
    version: Optional[int] = None

    @field_validator("player_scores")
    @classmethod
    def validate_unique_players(cls, v: List[PlayerScoreIn]) -> List[PlayerScoreIn]:
        ids = [ps.player_id for ps in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Each player may appear only once in playerScores")
        return v


class PlayerScoreResponse(CamelModel):
    player_id: str
    player_name: str
    rating: Optional[int] = None
    round_scores: List[ScoreValue]
    total_score: float

    @classmethod
    def from_score(cls, ps: PlayerScore) -> "PlayerScoreResponse":
        return cls(
            player_id=ps.player_id,
            player_name=ps.player_name,
            rating=ps.rating,
            round_scores=list(ps.round_scores),
            total_score=ps.total_score,
        )


class TournamentResultResponse(CamelModel):
    tournament_id: str
    player_scores: List[PlayerScoreResponse]
    version: Optional[int] = None

    @classmethod
    def from_result(cls, result: TournamentResult) -> "TournamentResultResponse":
        return cls(
            tournament_id=result.tournament_id,
            player_scores=[PlayerScoreResponse.from_score(ps) for ps in result.player_scores],
            version=result.version,
        )


class RoundScoreUpdate(CamelModel):
    score: ScoreValue

    @field_validator("score")
    @classmethod
    def validate_score(cls, v: ScoreValue) -> ScoreValue:
        try:
            return normalize_score(v)
        except InvalidScoreError as exc:
            raise ValueError(str(exc)) from exc


class StandingResponse(PlayerScoreResponse):
    rank: int

    @classmethod
    def from_standing(cls, standing: Standing) -> "StandingResponse":
        ps = standing.score
        return cls(
            rank=standing.rank,
            player_id=ps.player_id,
            player_name=ps.player_name,
            rating=ps.rating,
            round_scores=list(ps.round_scores),
            total_score=ps.total_score,
        )


# =============================================================================
# Blog
# =============================================================================

class BlogPostCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    image_url: Optional[str] = Field(default=None, max_length=500)
    category: BlogCategory
    tags: Union[List[str], str] = Field(default_factory=list)
    content: str = Field(..., min_length=1)


class BlogPostResponse(CamelModel):
    id: str
    title: str
    slug: str
    image_url: Optional[str] = None
    category: str
    tags: List[str]
    content: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Misc
# =============================================================================

class LoginRequest(CamelModel):
    password: Optional[str] = None


class SessionResponse(CamelModel):
    is_logged_in: bool


class UploadResponse(CamelModel):
    success: bool
    url: Optional[str] = None
    message: Optional[str] = None


class DescriptionResponse(CamelModel):
    description: str


class MessageResponse(CamelModel):
    message: str
