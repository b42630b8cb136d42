"""
Request orchestration for the Pudgy Pet service.

One interaction is one load -> decay -> apply -> narrate -> persist cycle
against the caller's snapshot. Concurrent interactions for the same identity
are last-write-wins.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .config import Settings
from .engine import apply_action, decay, greeting_cue
from .errors import ValidationError
from .models import Action, StatSnapshot, default_snapshot, now_ms
from .narrative import Narrator, build_narrator
from .store import StatStore, build_store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InteractionResult:
    message: str
    stats: StatSnapshot
    action: str | None = None


class PetService:
    """Ties the engine to a snapshot store and a narrator."""

    def __init__(
        self,
        store: StatStore,
        narrator: Narrator,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self.store = store
        self.narrator = narrator
        self._clock = clock

    async def interact(
        self, user_id: str | None, action: str | None, message: str | None = None
    ) -> InteractionResult:
        """
        Perform one action on the user's pet.

        Args:
            user_id: Identity owning the pet
            action: Raw action string from the client
            message: Optional free text (used by chat and unknown actions)

        Returns:
            The pet's reply, the persisted stats and the action as received

        Raises:
            ValidationError: If ``user_id`` or ``action`` is missing
            StoreError: If the snapshot can't be loaded or saved
        """
        if not action:
            raise ValidationError("Action is required")
        if not user_id:
            raise ValidationError("User ID is required")

        now = self._clock()
        current = await self._load(user_id, now)
        outcome = apply_action(decay(current, now), Action.parse(action), message, now)

        reply = await self.narrator.generate(outcome.cue, outcome.stats)
        await self.store.set(user_id, outcome.stats)

        logger.info(
            "user=%s action=%s cue=%s mood=%s",
            user_id,
            action,
            outcome.cue.kind.value,
            outcome.stats.mood.value,
        )
        return InteractionResult(message=reply, stats=outcome.stats, action=action)

    async def check_in(self, user_id: str | None) -> InteractionResult:
        """Decay and save the user's pet, then let it greet its owner."""
        if not user_id:
            raise ValidationError("User ID is required")

        now = self._clock()
        stats = decay(await self._load(user_id, now), now)
        await self.store.set(user_id, stats)

        reply = await self.narrator.generate(greeting_cue(stats), stats)
        return InteractionResult(message=reply, stats=stats)

    async def aclose(self) -> None:
        await self.narrator.aclose()
        await self.store.aclose()

    async def _load(self, user_id: str, now: float) -> StatSnapshot:
        snapshot = await self.store.get(user_id)
        if snapshot is None:
            logger.debug("No stored pet for user=%s, starting fresh", user_id)
            return default_snapshot(now)
        return snapshot


def build_service(settings: Settings) -> PetService:
    return PetService(build_store(settings), build_narrator(settings))
