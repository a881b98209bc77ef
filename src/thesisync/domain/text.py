"""Locale-tagged text and the precedence rule that resolves it to one display string."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import cast

DEFAULT_LOCALES: tuple[str, ...] = ("en", "da")

type LocaleEntry[T] = tuple[str, T]


def locale_matches(locale: str, wanted: str) -> bool:
    """Return True when ``locale`` is ``wanted`` or a regional variant of it (``en_GB``)."""

    normalized = locale.strip().lower().replace("-", "_")
    target = wanted.strip().lower().replace("-", "_")
    return normalized == target or normalized.startswith(f"{target}_")


def select_by_locale[T](
    entries: Sequence[LocaleEntry[T]],
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> T | None:
    """Pick the entry for the first matching locale, else the first entry, else None."""

    for wanted in locales:
        for locale, value in entries:
            if locale_matches(locale, wanted):
                return value
    if entries:
        return entries[0][1]
    return None


@dataclass(frozen=True, slots=True)
class LocalizedText:
    """Ordered ``(locale, value)`` pairs; an empty locale marks untagged text."""

    entries: tuple[LocaleEntry[str], ...] = ()

    @classmethod
    def of(cls, **values: str) -> LocalizedText:
        return cls(tuple((locale, value) for locale, value in values.items()))

    @classmethod
    def coerce(cls, raw: object) -> LocalizedText:
        """Normalize any upstream text shape, tolerating None and plain strings."""

        if isinstance(raw, LocalizedText):
            return raw
        return cls(tuple(_collect_entries(raw)))

    def __bool__(self) -> bool:
        return bool(self.entries)

    def resolve(self, locales: Sequence[str] = DEFAULT_LOCALES) -> str:
        return select_by_locale(self.entries, locales) or ""


@dataclass(frozen=True, slots=True)
class LocalizedKeywords:
    """One keyword container: a keyword list per locale."""

    entries: tuple[LocaleEntry[tuple[str, ...]], ...] = ()

    def resolve(self, locales: Sequence[str] = DEFAULT_LOCALES) -> tuple[str, ...]:
        return select_by_locale(self.entries, locales) or ()


def resolve_localized_text(raw: object, locales: Sequence[str] = DEFAULT_LOCALES) -> str:
    """Resolve a locale-tagged value to a single string.

    Precedence is primary locale, then secondary locale, then the first available
    entry, then the empty string. Missing values, ``None`` and plain strings are
    accepted; absence of text is not an error.
    """

    if isinstance(raw, str):
        return raw
    return LocalizedText.coerce(raw).resolve(locales)


def resolve_keywords(
    groups: Sequence[LocalizedKeywords],
    locales: Sequence[str] = DEFAULT_LOCALES,
) -> tuple[str, ...]:
    """Resolve every keyword container by locale precedence, de-duplicating in order."""

    seen: dict[str, None] = {}
    for group in groups:
        for keyword in group.resolve(locales):
            cleaned = keyword.strip()
            if cleaned:
                seen.setdefault(cleaned, None)
    return tuple(seen)


def _collect_entries(raw: object) -> list[LocaleEntry[str]]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [("", raw)] if raw.strip() else []
    if isinstance(raw, LocalizedText):
        return list(raw.entries)
    if isinstance(raw, Mapping):
        mapping = cast(Mapping[str, object], raw)
        if "value" in mapping:
            value = mapping.get("value")
            locale = mapping.get("locale")
            if isinstance(value, str) and value.strip():
                return [(locale if isinstance(locale, str) else "", value)]
            return _collect_entries(value) if isinstance(value, Mapping | list) else []
        for container_key in ("text", "term", "name"):
            if container_key in mapping:
                return _collect_entries(mapping[container_key])
        return []
    if isinstance(raw, list | tuple):
        entries: list[LocaleEntry[str]] = []
        for item in cast(Sequence[object], raw):
            entries.extend(_collect_entries(item))
        return entries
    return []
