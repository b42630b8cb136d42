"""Pytest configuration and fixtures for Pudgy Pet tests."""

import pytest

from pudgy_pet.errors import StoreError
from pudgy_pet.models import Mood, StatSnapshot
from pudgy_pet.narrative import FallbackNarrator
from pudgy_pet.service import PetService
from pudgy_pet.store import MemoryStatStore

T0 = 1_700_000_000_000.0
MINUTE = 60_000.0
HOUR = 60 * MINUTE


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingStore(MemoryStatStore):
    """Store whose writes always fail."""

    async def set(self, identity: str, snapshot: StatSnapshot) -> None:
        raise StoreError("disk on fire")


def make_stats(
    hunger: int = 50,
    happiness: int = 70,
    energy: int = 80,
    last: float = T0,
) -> StatSnapshot:
    return StatSnapshot(
        hunger=hunger,
        happiness=happiness,
        energy=energy,
        mood=Mood.CONTENT,
        last_interaction=last,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStatStore:
    return MemoryStatStore()


@pytest.fixture
def service(store: MemoryStatStore, clock: FakeClock) -> PetService:
    return PetService(store, FallbackNarrator(), clock=clock)
