"""
Tests for the request orchestrator.

These tests run full load -> decay -> apply -> narrate -> persist cycles
against the in-memory store with a fake clock.
"""

import httpx
import pytest
from conftest import HOUR, T0, FailingStore, FakeClock, make_stats

from pudgy_pet.errors import StoreError, ValidationError
from pudgy_pet.models import Mood
from pudgy_pet.narrative import (
    FALLBACK_TEXTS,
    ChatCompletionNarrator,
    FallbackCategory,
    FallbackNarrator,
)
from pudgy_pet.service import PetService
from pudgy_pet.store import MemoryStatStore


class TestPetService:
    """Test suite for PetService functionality."""

    async def test_fresh_identity_feed(self, service, store):
        """Test a new user's first feed starts from defaults and is persisted."""
        result = await service.interact("alice", "feed")

        assert result.action == "feed"
        assert result.message == FALLBACK_TEXTS[FallbackCategory.FEEDING]
        assert (result.stats.hunger, result.stats.happiness, result.stats.energy) == (
            80,
            80,
            80,
        )
        assert result.stats.mood == Mood.ECSTATIC
        assert result.stats.last_interaction == T0
        assert await store.get("alice") == result.stats

    async def test_decay_is_applied_before_action(self, service, store, clock):
        """Test elapsed time since the last visit is charged first."""
        await store.set("bob", make_stats(hunger=50, happiness=50, energy=30, last=T0))
        clock.advance(6 * HOUR)

        # energy 30 - 12 = 18, too tired to play
        result = await service.interact("bob", "play")

        assert result.message == FALLBACK_TEXTS[FallbackCategory.TIREDNESS_COMPLAINT]
        assert (result.stats.hunger, result.stats.happiness, result.stats.energy) == (
            20,
            32,
            18,
        )
        assert result.stats.last_interaction == T0 + 6 * HOUR

    async def test_identities_are_independent(self, service, store):
        await service.interact("alice", "feed")
        await service.interact("bob", "play")

        alice = await store.get("alice")
        bob = await store.get("bob")
        assert alice.hunger == 80
        assert bob.hunger == 50
        assert bob.energy == 65

    async def test_last_interaction_never_goes_back(self, service, store, clock):
        await service.interact("alice", "pet")
        clock.advance(-HOUR)

        result = await service.interact("alice", "status")

        assert result.stats.last_interaction == T0

    @pytest.mark.parametrize(
        ("user_id", "action", "error"),
        [
            (None, "feed", "User ID is required"),
            ("", "feed", "User ID is required"),
            ("alice", None, "Action is required"),
            ("alice", "", "Action is required"),
        ],
    )
    async def test_validation(self, service, store, user_id, action, error):
        """Test missing fields are rejected without touching the store."""
        with pytest.raises(ValidationError, match=error):
            await service.interact(user_id, action)
        assert await store.get("alice") is None

    async def test_store_failure_propagates(self, clock):
        service = PetService(FailingStore(), FallbackNarrator(), clock=clock)

        with pytest.raises(StoreError):
            await service.interact("alice", "feed")

    async def test_narrative_failure_does_not_block_persistence(self):
        """Test stats are saved even when the model is unreachable."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        store = MemoryStatStore()
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            narrator = ChatCompletionNarrator("https://ai.test/v1", "gaia", client=client)
            service = PetService(store, narrator, clock=FakeClock())

            result = await service.interact("alice", "sleep")

        assert result.message == FALLBACK_TEXTS[FallbackCategory.SLEEPING]
        assert (await store.get("alice")).energy == 100


class TestCheckIn:
    async def test_fresh_identity(self, service, store):
        """Test checking in on a new pet stores the defaults."""
        result = await service.check_in("carol")

        assert result.action is None
        assert (result.stats.hunger, result.stats.happiness, result.stats.energy) == (
            50,
            70,
            80,
        )
        assert result.stats.mood == Mood.HAPPY
        assert await store.get("carol") == result.stats

    async def test_hungry_greeting_after_long_absence(self, service, store, clock):
        await service.check_in("carol")
        clock.advance(5 * HOUR)

        result = await service.check_in("carol")

        assert result.stats.hunger == 25
        assert result.message == FALLBACK_TEXTS[FallbackCategory.HUNGER_COMPLAINT]
        assert (await store.get("carol")).last_interaction == T0 + 5 * HOUR

    async def test_requires_user(self, service):
        with pytest.raises(ValidationError):
            await service.check_in(None)
