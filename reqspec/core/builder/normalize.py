"""Text normalization helpers shared by the builder and evaluators."""

from typing import Callable, Iterable, TypeVar

T = TypeVar("T")


def format_skill_text(text: str) -> str:
    """Title-case a skill or designation entered by the user.

    Each whitespace-delimited word gets an upper-case first character and a
    lower-case remainder; runs of whitespace collapse to one space.

    Example:
        format_skill_text("  react   native ")  # "React Native"
    """
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split())


def location_key(value: str) -> str:
    """Comparison key for locations: trimmed and lower-cased."""
    return value.strip().lower()


def skill_key(value: str) -> str:
    """Comparison key for skills, insensitive to case and spacing."""
    return " ".join(value.lower().split())


def dedupe(values: Iterable[T], key: Callable[[T], object] | None = None) -> list[T]:
    """Drop repeated values, keeping the first occurrence and its order."""
    seen: set[object] = set()
    result: list[T] = []
    for value in values:
        marker = key(value) if key else value
        if marker in seen:
            continue
        seen.add(marker)
        result.append(value)
    return result


def normalize_locations(values: Iterable[str]) -> list[str]:
    """Trim, drop empties and dedupe locations case-insensitively.

    The first occurrence of each location wins, both for its position and
    its casing, so the function is idempotent.

    Args:
        values: Raw location strings

    Returns:
        Ordered list of distinct trimmed locations
    """
    trimmed = (value.strip() for value in values if value is not None)
    return dedupe((value for value in trimmed if value), key=str.lower)
