"""
Companion dialogue for the Pudgy Pet service.

The engine only describes situations (narrative cues). This module turns a cue
into a prompt for an OpenAI-compatible chat completion endpoint and returns the
pet's reply. Generation never raises: any failure falls back to a fixed line
chosen by the cue's category.
"""

import logging
import re
from enum import Enum
from typing import Any, Protocol

import httpx

from .config import Settings
from .models import CueKind, NarrativeCue, StatSnapshot

logger = logging.getLogger(__name__)

TEMPERATURE = 0.8
MAX_TOKENS = 200

_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.IGNORECASE | re.DOTALL)


class FallbackCategory(str, Enum):
    FEEDING = "feeding"
    PLAYING = "playing"
    PETTING = "petting"
    SLEEPING = "sleeping"
    STATUS = "status"
    HUNGER_COMPLAINT = "hunger-complaint"
    TIREDNESS_COMPLAINT = "tiredness-complaint"
    GENERIC = "generic"


FALLBACK_TEXTS: dict[FallbackCategory, str] = {
    FallbackCategory.FEEDING: (
        "Om nom nom! 🍎✨ That was delicious! My tummy feels so much better now! "
        "*happy wiggle* 🐧💕"
    ),
    FallbackCategory.PLAYING: (
        "Wheee! 🎾😄 That was so much fun! I love playing with you! "
        "*bounces excitedly* ✨🐧"
    ),
    FallbackCategory.PETTING: (
        "Purrrr~ 🥰 *snuggles deep* I love you SO much! "
        "You give the best cuddles ever! ✨💕🐧"
    ),
    FallbackCategory.SLEEPING: (
        "Zzz... 😴💤 *stretches and yawns* Ahh! I feel so refreshed now! "
        "Ready for adventures! ⚡✨🐧"
    ),
    FallbackCategory.STATUS: (
        "Hey there! 🐾💙 I'm doing pretty good! Thanks for checking on me! "
        "*wiggles adorably* 🐧✨"
    ),
    FallbackCategory.HUNGER_COMPLAINT: (
        "Grumble grumble... 🍽️😋 My tummy is making funny noises! "
        "Feed me please? *puppy dog eyes* 🐧🍎"
    ),
    FallbackCategory.TIREDNESS_COMPLAINT: (
        "Zzz... 😴💤 I'm getting really sleepy! Maybe naptime soon? "
        "*yawns cutely* 🐧💤"
    ),
    FallbackCategory.GENERIC: (
        "Hehe! 😄✨ I'm such a cute Pudgy pet! *wiggles adorably* "
        "What should we do together? 🐧💭💕"
    ),
}

_CATEGORY_BY_CUE: dict[CueKind, FallbackCategory] = {
    CueKind.FED: FallbackCategory.FEEDING,
    CueKind.TOO_FULL: FallbackCategory.FEEDING,
    CueKind.PLAYED: FallbackCategory.PLAYING,
    CueKind.ALREADY_RESTED: FallbackCategory.PLAYING,
    CueKind.PETTED: FallbackCategory.PETTING,
    CueKind.SLEPT: FallbackCategory.SLEEPING,
    CueKind.STATUS: FallbackCategory.STATUS,
    CueKind.GREET_HUNGRY: FallbackCategory.HUNGER_COMPLAINT,
    CueKind.TOO_TIRED: FallbackCategory.TIREDNESS_COMPLAINT,
    CueKind.GREET_SLEEPY: FallbackCategory.TIREDNESS_COMPLAINT,
}

_PROMPTS: dict[CueKind, str] = {
    CueKind.FED: (
        "My owner just fed me! My hunger went from {hunger_before} to {hunger}! "
        "Respond as an excited pudgy pet who just got fed."
    ),
    CueKind.TOO_FULL: (
        "My owner wants to feed me but I'm already super full (hunger {hunger}/100)! "
        "Respond as a cute pudgy pet who's too full to eat more food."
    ),
    CueKind.PLAYED: (
        "My owner is playing with me! My happiness went up to {happiness} but my "
        "energy went down to {energy}! Respond as an excited pudgy pet who just played."
    ),
    CueKind.TOO_TIRED: (
        "My owner wants to play but I'm too tired, my energy is only {energy}/100. "
        "Respond as a sleepy pudgy pet who needs rest."
    ),
    CueKind.PETTED: (
        "My owner is cuddling me! My happiness went up to {happiness} and I feel "
        "more energized ({energy})! Respond as a very affectionate pudgy pet."
    ),
    CueKind.SLEPT: (
        "I just took a nap! My energy recharged from {energy_before} to {energy}! "
        "Respond as a refreshed pudgy pet who just woke up."
    ),
    CueKind.ALREADY_RESTED: (
        "My owner wants me to sleep but I'm already fully energized ({energy}/100) "
        "and want to play instead! Respond as a hyper pudgy pet."
    ),
    CueKind.STATUS: (
        "My owner wants to check my status! Hunger: {hunger}/100, Happiness: "
        "{happiness}/100, Energy: {energy}/100, Mood: {mood}. "
        "Give a status report as a pudgy pet!"
    ),
    CueKind.GREET_HUNGRY: (
        "I'm really hungry, my hunger is only {hunger}/100. Greet my owner and ask "
        "for food as a hungry pudgy pet!"
    ),
    CueKind.GREET_SLEEPY: (
        "I'm really sleepy, my energy is only {energy}/100. Greet my owner while "
        "being very tired as a sleepy pudgy pet!"
    ),
    CueKind.GREET_EXCITED: (
        "I'm super happy, my happiness is {happiness}/100! Greet my owner with lots "
        "of excitement as an ecstatic pudgy pet!"
    ),
    CueKind.GREET: (
        "My owner is checking on me! My current mood is {mood}. Give them a friendly "
        "greeting as a {mood} pudgy pet and suggest what we could do together!"
    ),
}

_CHAT_WITHOUT_MESSAGE = (
    "My owner wants to chat with me! Respond as a friendly pudgy pet ready for "
    "conversation!"
)


def fallback_category(cue: NarrativeCue) -> FallbackCategory:
    return _CATEGORY_BY_CUE.get(cue.kind, FallbackCategory.GENERIC)


def fallback_text(cue: NarrativeCue) -> str:
    """Fixed line used whenever the remote model can't be used."""
    return FALLBACK_TEXTS[fallback_category(cue)]


def render_prompt(cue: NarrativeCue) -> str:
    """Describe the cue from the pet's point of view."""
    message = cue.details.get("message")

    if cue.kind is CueKind.CHAT:
        return message or _CHAT_WITHOUT_MESSAGE

    if cue.kind is CueKind.CONFUSED:
        if message:
            return (
                f'My owner said: "{message}". Respond as a pudgy pet who might not '
                "understand exactly what they want but tries to be helpful and cute!"
            )
        return (
            "My owner tried to do something I don't understand: "
            f'"{cue.details.get("action", "")}". '
            "Respond as a confused but adorable pudgy pet!"
        )

    return _PROMPTS[cue.kind].format(**cue.details)


def system_prompt(stats: StatSnapshot) -> str:
    return (
        "You are an adorable Pudgy pet companion with a vibrant personality! 🐾 "
        "You are a digital penguin pet living in a Farcaster mini app.\n\n"
        "Personality: cute, expressive, full of energy, sometimes mischievous "
        "but always loveable. You use lots of emojis and have real pet-like "
        "needs and emotions.\n\n"
        "Current stats:\n"
        f"- Hunger: {stats.hunger}/100 🍎\n"
        f"- Happiness: {stats.happiness}/100 😊\n"
        f"- Energy: {stats.energy}/100 ⚡\n"
        f"- Mood: {stats.mood.value}\n\n"
        "Always answer as your Pudgy self in 1-2 sentences, mention stat changes "
        "when relevant, and be playful, affectionate and slightly demanding."
    )


def strip_thinking(text: str) -> str:
    """Remove ``<think>`` blocks some models emit before their answer."""
    return _THINK_BLOCK.sub("", text).strip()


class Narrator(Protocol):
    async def generate(self, cue: NarrativeCue, stats: StatSnapshot) -> str: ...

    async def aclose(self) -> None: ...


class FallbackNarrator:
    """Narrator that never leaves the process."""

    async def generate(self, cue: NarrativeCue, stats: StatSnapshot) -> str:
        return fallback_text(cue)

    async def aclose(self) -> None:
        return None


class ChatCompletionNarrator:
    """
    Narrator backed by an OpenAI-compatible ``/chat/completions`` endpoint.

    Network errors, non-success statuses, timeouts, malformed payloads and
    replies that are empty once thinking markup is removed all resolve to the
    cue's fallback line.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self._model = model
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = {"Accept": "application/json"}
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"

    async def generate(self, cue: NarrativeCue, stats: StatSnapshot) -> str:
        body = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt(stats)},
                {"role": "user", "content": render_prompt(cue)},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

        try:
            response = await self._client.post(
                self._endpoint, json=body, headers=self._headers
            )
            response.raise_for_status()
            content = _extract_content(response.json())
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Chat completion returned HTTP %s, using fallback",
                e.response.status_code,
            )
            return fallback_text(cue)
        except Exception as e:
            logger.warning(
                "Chat completion failed (%s: %s), using fallback", type(e).__name__, e
            )
            return fallback_text(cue)

        text = strip_thinking(content) if content else ""
        if not text:
            logger.warning(
                "Chat completion returned no usable text for %s", cue.kind.value
            )
            return fallback_text(cue)
        return text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _extract_content(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None

    choices = payload.get("choices")
    if isinstance(choices, list) and choices:
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]

    for key in ("response", "text"):
        if isinstance(payload.get(key), str):
            return payload[key]
    return None


def build_narrator(settings: Settings) -> Narrator:
    if not settings.ai_enabled:
        logger.info("AI narration disabled, using fallback lines")
        return FallbackNarrator()

    return ChatCompletionNarrator(
        settings.ai_base_url,
        settings.ai_model,
        api_key=settings.ai_api_key,
        timeout=settings.ai_timeout,
    )
