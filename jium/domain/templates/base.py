"""Shared pieces for built-in templates."""

from collections.abc import Mapping

from jium.domain.entities.conversation import SuggestedReply
from jium.domain.services.field_validator import DEFAULT_SKIP_VALUES

_HANGUL_FIRST, _HANGUL_LAST = 0xAC00, 0xD7A3


def generate_button(label: str = "✨ 프롬프트 생성하기") -> SuggestedReply:
    """Terminal suggestion that triggers synthesis."""
    return SuggestedReply(label=label, triggers_final=True)


def replies(*labels: str) -> tuple[SuggestedReply, ...]:
    return tuple(SuggestedReply(label=label) for label in labels)


def provided(
    inputs: Mapping[str, str],
    key: str,
    skip_values: tuple[str, ...] = DEFAULT_SKIP_VALUES,
) -> str | None:
    """Value of *key* unless absent or answered with one of *skip_values*."""
    value = (inputs.get(key) or "").strip()
    if not value or value in skip_values:
        return None
    return value


def has_final_consonant(word: str) -> bool:
    """True when *word* ends in a Hangul syllable with a final consonant (받침)."""
    if not word:
        return False
    code = ord(word[-1])
    return _HANGUL_FIRST <= code <= _HANGUL_LAST and (code - _HANGUL_FIRST) % 28 != 0


def with_object_particle(word: str) -> str:
    """*word* followed by 을 after a final consonant, 를 otherwise."""
    return word + ("을" if has_final_consonant(word) else "를")
