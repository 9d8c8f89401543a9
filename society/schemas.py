"""Pydantic schemas for the society JSON files and API request bodies.

Field names follow the camelCase used in the JSON files; records keep any
extra keys they arrive with.
"""

from pydantic import BaseModel, Field, field_validator

from .constants import TRANSACTION_TYPES


class HandicapEntry(BaseModel):
    """One entry in a player's handicap history."""

    date: str
    handicap: float
    eventId: str | None = None
    reason: str = ''

    class Config:
        extra = 'allow'


class Player(BaseModel):
    """Society member."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: str | None = None
    phone: str | None = None
    leagueId: str | None = None
    handicapHistory: list[HandicapEntry] = Field(..., min_length=1)

    class Config:
        extra = 'allow'


class Score(BaseModel):
    """A player's round result as submitted for finalization."""

    playerId: str = Field(..., min_length=1)
    stablefordScore: int
    snakes: int = Field(default=0, ge=0)
    camels: int = Field(default=0, ge=0)

    class Config:
        extra = 'allow'


class Event(BaseModel):
    """Society event (one round at one course)."""

    eventId: str = Field(..., min_length=1)
    date: str = Field(..., pattern=r'^\d{4}-\d{2}-\d{2}$')
    courseName: str = ''
    isFinalized: bool = False
    scores: list[Score] = Field(default_factory=list)
    rolloverAmount: float | None = None

    class Config:
        extra = 'allow'


class LedgerEntry(BaseModel):
    """Single transaction in the society ledger."""

    id: str = Field(..., min_length=1)
    date: str
    eventId: str | None = None
    playerId: str | None = None
    type: str
    amount: float
    description: str = ''

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Only the transaction types the society posts are allowed."""
        if v not in TRANSACTION_TYPES:
            raise ValueError(f'Invalid transaction type: {v}')
        return v

    class Config:
        extra = 'allow'


class FinalizeRequest(BaseModel):
    """Body of a finalizeEvent call."""

    eventId: str = Field(..., min_length=1)
    scores: list[Score] = Field(..., min_length=1)
    allEvents: list[dict]


class UnfinalizeRequest(BaseModel):
    """Body of an unfinalizeEvent call."""

    eventId: str = Field(..., min_length=1)


class AddPlayerRequest(BaseModel):
    """Body of an addPlayer call."""

    name: str = Field(..., min_length=1)
    email: str | None = None
    phone: str | None = None
    leagueId: str = Field(..., min_length=1)
    handicap: float
