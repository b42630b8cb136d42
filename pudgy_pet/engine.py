"""
Pet-state simulation engine.

Everything here is pure: functions take a snapshot plus the current time and
return a new snapshot, never touching storage or the network. Mood is always
recomputed from the numeric stats so it can never drift from them.
"""

import math
from dataclasses import dataclass

from .models import (
    STAT_MAX,
    STAT_MIN,
    Action,
    ActionKind,
    CueKind,
    Mood,
    NarrativeCue,
    StatSnapshot,
)

MS_PER_HOUR = 3_600_000

HUNGER_DECAY_PER_HOUR = 5
HAPPINESS_DECAY_PER_HOUR = 3
ENERGY_DECAY_PER_HOUR = 2

FEED_HUNGER_GAIN = 30
FEED_HAPPINESS_GAIN = 10
FULL_THRESHOLD = 90

PLAY_HAPPINESS_GAIN = 20
PLAY_ENERGY_COST = 15
PLAY_MIN_ENERGY = 20

PET_HAPPINESS_GAIN = 15
PET_ENERGY_GAIN = 5

SLEEP_ENERGY_GAIN = 40
RESTED_THRESHOLD = 90

GREET_LOW_THRESHOLD = 30
GREET_EXCITED_THRESHOLD = 80

# (lower bound, mood), checked from the top; bounds are inclusive.
_MOOD_THRESHOLDS: tuple[tuple[float, Mood], ...] = (
    (80, Mood.ECSTATIC),
    (60, Mood.HAPPY),
    (40, Mood.CONTENT),
    (20, Mood.SAD),
)


@dataclass(frozen=True)
class ActionOutcome:
    """Result of applying an action: what happened and the new state."""

    cue: NarrativeCue
    stats: StatSnapshot


def clamp(value: int) -> int:
    return max(STAT_MIN, min(STAT_MAX, value))


def derive_mood(hunger: int, happiness: int, energy: int) -> Mood:
    """Map the real-valued average of the three stats onto a mood."""
    average = (hunger + happiness + energy) / 3
    for lower_bound, mood in _MOOD_THRESHOLDS:
        if average >= lower_bound:
            return mood
    return Mood.CRANKY


def _rebuild(
    snapshot: StatSnapshot,
    now: float,
    *,
    hunger: int | None = None,
    happiness: int | None = None,
    energy: int | None = None,
) -> StatSnapshot:
    hunger = clamp(snapshot.hunger if hunger is None else hunger)
    happiness = clamp(snapshot.happiness if happiness is None else happiness)
    energy = clamp(snapshot.energy if energy is None else energy)
    return StatSnapshot(
        hunger=hunger,
        happiness=happiness,
        energy=energy,
        mood=derive_mood(hunger, happiness, energy),
        last_interaction=max(now, snapshot.last_interaction),
    )


def decay(snapshot: StatSnapshot, now: float) -> StatSnapshot:
    """
    Apply passive stat loss for the time elapsed since the last interaction.

    Args:
        snapshot: The stored pet state
        now: Current time in epoch milliseconds

    Returns:
        A new snapshot stamped with ``now``. A clock that went backwards counts
        as zero elapsed time and keeps the stored timestamp.
    """
    hours = max(0.0, now - snapshot.last_interaction) / MS_PER_HOUR

    return _rebuild(
        snapshot,
        now,
        hunger=snapshot.hunger - math.floor(hours * HUNGER_DECAY_PER_HOUR),
        happiness=snapshot.happiness - math.floor(hours * HAPPINESS_DECAY_PER_HOUR),
        energy=snapshot.energy - math.floor(hours * ENERGY_DECAY_PER_HOUR),
    )


def apply_action(
    snapshot: StatSnapshot,
    action: Action,
    message: str | None,
    now: float,
) -> ActionOutcome:
    """
    Apply a user action to the pet.

    Refused actions (feeding a full pet, playing while exhausted, sleeping
    while fully rested) still produce a valid outcome: the stats are left
    as-is and the cue tells the narrative layer why.

    Args:
        snapshot: Current, already decayed, pet state
        action: The resolved action
        message: Optional free text the user sent along
        now: Current time in epoch milliseconds

    Returns:
        The narrative cue and the new snapshot
    """
    kind = action.kind

    if kind is ActionKind.FEED:
        if snapshot.hunger >= FULL_THRESHOLD:
            return _unchanged(snapshot, now, CueKind.TOO_FULL, hunger=snapshot.hunger)
        gain = min(FEED_HUNGER_GAIN, STAT_MAX - snapshot.hunger)
        stats = _rebuild(
            snapshot,
            now,
            hunger=snapshot.hunger + gain,
            happiness=snapshot.happiness + FEED_HAPPINESS_GAIN,
        )
        return ActionOutcome(
            cue=NarrativeCue(
                kind=CueKind.FED,
                details={"hunger_before": snapshot.hunger, "hunger": stats.hunger},
            ),
            stats=stats,
        )

    if kind is ActionKind.PLAY:
        if snapshot.energy < PLAY_MIN_ENERGY:
            return _unchanged(snapshot, now, CueKind.TOO_TIRED, energy=snapshot.energy)
        stats = _rebuild(
            snapshot,
            now,
            happiness=snapshot.happiness + PLAY_HAPPINESS_GAIN,
            energy=snapshot.energy - PLAY_ENERGY_COST,
        )
        return ActionOutcome(
            cue=NarrativeCue(
                kind=CueKind.PLAYED,
                details={"happiness": stats.happiness, "energy": stats.energy},
            ),
            stats=stats,
        )

    if kind is ActionKind.PET:
        stats = _rebuild(
            snapshot,
            now,
            happiness=snapshot.happiness + PET_HAPPINESS_GAIN,
            energy=snapshot.energy + PET_ENERGY_GAIN,
        )
        return ActionOutcome(
            cue=NarrativeCue(
                kind=CueKind.PETTED,
                details={"happiness": stats.happiness, "energy": stats.energy},
            ),
            stats=stats,
        )

    if kind is ActionKind.SLEEP:
        if snapshot.energy >= RESTED_THRESHOLD:
            return _unchanged(
                snapshot, now, CueKind.ALREADY_RESTED, energy=snapshot.energy
            )
        gain = min(SLEEP_ENERGY_GAIN, STAT_MAX - snapshot.energy)
        stats = _rebuild(snapshot, now, energy=snapshot.energy + gain)
        return ActionOutcome(
            cue=NarrativeCue(
                kind=CueKind.SLEPT,
                details={"energy_before": snapshot.energy, "energy": stats.energy},
            ),
            stats=stats,
        )

    if kind is ActionKind.STATUS:
        stats = _rebuild(snapshot, now)
        return ActionOutcome(
            cue=NarrativeCue(
                kind=CueKind.STATUS,
                details={
                    "hunger": stats.hunger,
                    "happiness": stats.happiness,
                    "energy": stats.energy,
                    "mood": stats.mood.value,
                },
            ),
            stats=stats,
        )

    if kind is ActionKind.CHAT:
        return _unchanged(snapshot, now, CueKind.CHAT, message=message)

    if kind is ActionKind.UNKNOWN:
        return _unchanged(
            snapshot, now, CueKind.CONFUSED, action=action.raw, message=message
        )

    raise AssertionError(f"Unhandled action kind: {kind!r}")


def greeting_cue(snapshot: StatSnapshot) -> NarrativeCue:
    """Pick what the pet should say when its owner drops by to check on it."""
    if snapshot.hunger < GREET_LOW_THRESHOLD:
        return NarrativeCue(
            kind=CueKind.GREET_HUNGRY, details={"hunger": snapshot.hunger}
        )
    if snapshot.energy < GREET_LOW_THRESHOLD:
        return NarrativeCue(
            kind=CueKind.GREET_SLEEPY, details={"energy": snapshot.energy}
        )
    if snapshot.happiness > GREET_EXCITED_THRESHOLD:
        return NarrativeCue(
            kind=CueKind.GREET_EXCITED, details={"happiness": snapshot.happiness}
        )
    return NarrativeCue(kind=CueKind.GREET, details={"mood": snapshot.mood.value})


def _unchanged(
    snapshot: StatSnapshot, now: float, cue_kind: CueKind, **details: object
) -> ActionOutcome:
    return ActionOutcome(
        cue=NarrativeCue(kind=cue_kind, details=details),
        stats=_rebuild(snapshot, now),
    )
