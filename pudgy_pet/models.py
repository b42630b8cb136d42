"""
Shared data models for the Pudgy Pet service.

This module defines the core domain models used across multiple layers
of the application (engine, persistence, narrative, API).
"""

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

STAT_MIN = 0
STAT_MAX = 100

DEFAULT_HUNGER = 50
DEFAULT_HAPPINESS = 70
DEFAULT_ENERGY = 80


class Mood(str, Enum):
    """Categorical mood derived from the numeric stats."""

    ECSTATIC = "ecstatic"
    HAPPY = "happy"
    CONTENT = "content"
    SAD = "sad"
    CRANKY = "cranky"


class StatSnapshot(BaseModel):
    """The complete state of one pet at one instant."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    hunger: int = Field(DEFAULT_HUNGER, ge=STAT_MIN, le=STAT_MAX)
    happiness: int = Field(DEFAULT_HAPPINESS, ge=STAT_MIN, le=STAT_MAX)
    energy: int = Field(DEFAULT_ENERGY, ge=STAT_MIN, le=STAT_MAX)
    mood: Mood = Field(Mood.CONTENT, description="Derived from the numeric stats")
    last_interaction: float = Field(
        ...,
        alias="lastInteraction",
        description="Epoch milliseconds of the last decay or action",
    )


def now_ms() -> float:
    """Current time in epoch milliseconds, the unit of ``last_interaction``."""
    return float(int(time.time() * 1000))


def default_snapshot(now: float | None = None) -> StatSnapshot:
    """Snapshot given to an identity that has no stored state yet."""
    return StatSnapshot(
        hunger=DEFAULT_HUNGER,
        happiness=DEFAULT_HAPPINESS,
        energy=DEFAULT_ENERGY,
        mood=Mood.CONTENT,
        last_interaction=now_ms() if now is None else now,
    )


class ActionKind(str, Enum):
    """Closed set of actions understood by the engine."""

    FEED = "feed"
    PLAY = "play"
    PET = "pet"
    SLEEP = "sleep"
    STATUS = "status"
    CHAT = "chat"
    UNKNOWN = "unknown"


_ACTION_ALIASES: dict[str, ActionKind] = {
    "feed": ActionKind.FEED,
    "play": ActionKind.PLAY,
    "pet": ActionKind.PET,
    "cuddle": ActionKind.PET,
    "sleep": ActionKind.SLEEP,
    "rest": ActionKind.SLEEP,
    "status": ActionKind.STATUS,
    "check": ActionKind.STATUS,
    "chat": ActionKind.CHAT,
}


class Action(BaseModel):
    """An action resolved from the raw string a client sent."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    raw: str = Field(..., description="The action string as received")

    @classmethod
    def parse(cls, raw: str) -> "Action":
        kind = _ACTION_ALIASES.get(raw.strip().lower(), ActionKind.UNKNOWN)
        return cls(kind=kind, raw=raw)


class CueKind(str, Enum):
    """Situations the narrative layer knows how to describe."""

    FED = "fed"
    TOO_FULL = "too_full"
    PLAYED = "played"
    TOO_TIRED = "too_tired"
    PETTED = "petted"
    SLEPT = "slept"
    ALREADY_RESTED = "already_rested"
    STATUS = "status"
    CHAT = "chat"
    CONFUSED = "confused"
    GREET_HUNGRY = "greet_hungry"
    GREET_SLEEPY = "greet_sleepy"
    GREET_EXCITED = "greet_excited"
    GREET = "greet"


class NarrativeCue(BaseModel):
    """Structured description of a situation, rendered to text elsewhere."""

    model_config = ConfigDict(frozen=True)

    kind: CueKind
    details: dict[str, Any] = Field(default_factory=dict)
