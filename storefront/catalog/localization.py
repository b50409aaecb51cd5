"""
Localization resolver for bilingual catalog fields.

Catalog records arrive with text fields that are either a plain string or an
object keyed by language code ({"en": "...", "ar": "..."}). They are
converted once, at ingestion, into one of two tagged variants:

- Plain(text)                  -- same text in every language
- Bilingual(primary, secondary) -- one text per configured language

`resolve()` is the only place that branches on the shape of a value. Every
other module asks it for a display string and never inspects the value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

PRIMARY = "primary"
SECONDARY = "secondary"

DEFAULT_PRIMARY_LANGUAGE = "en"
DEFAULT_SECONDARY_LANGUAGE = "ar"


@dataclass(frozen=True)
class Languages:
    """The two language codes a catalog is authored in."""

    primary: str = DEFAULT_PRIMARY_LANGUAGE
    secondary: str = DEFAULT_SECONDARY_LANGUAGE

    def role(self, language: Optional[str]) -> Optional[str]:
        """Map a language code (or role name) to PRIMARY / SECONDARY."""
        if language in (PRIMARY, self.primary):
            return PRIMARY
        if language in (SECONDARY, self.secondary):
            return SECONDARY
        return None

    @property
    def codes(self) -> tuple:
        return (self.primary, self.secondary)


DEFAULT_LANGUAGES = Languages()


@dataclass(frozen=True)
class Plain:
    text: str = ""


@dataclass(frozen=True)
class Bilingual:
    primary: str = ""
    secondary: str = ""


LocalizedText = Union[Plain, Bilingual]

EMPTY = Plain("")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def to_localized(raw: Any, languages: Languages = DEFAULT_LANGUAGES) -> LocalizedText:
    """Convert a raw JSON value into a LocalizedText variant.

    Mappings are read by language code first and by role name second, so
    both {"en": .., "ar": ..} and {"primary": .., "secondary": ..} are
    accepted. Anything that is neither a string nor a mapping is coerced
    with str(); falsy values become an empty Plain.
    """
    if isinstance(raw, (Plain, Bilingual)):
        return raw
    if not raw:
        return EMPTY
    if isinstance(raw, str):
        return Plain(raw)
    if isinstance(raw, Mapping):
        primary = raw.get(languages.primary) or raw.get(PRIMARY)
        secondary = raw.get(languages.secondary) or raw.get(SECONDARY)
        return Bilingual(primary=_text(primary), secondary=_text(secondary))
    return Plain(str(raw))


def resolve(value: Any, language: Optional[str], languages: Languages = DEFAULT_LANGUAGES) -> str:
    """Return the display string of `value` for `language`.

    Fallback order for bilingual values: requested language, primary,
    secondary, "". Never raises and never returns None.
    """
    localized = to_localized(value, languages)

    if isinstance(localized, Plain):
        return localized.text

    role = languages.role(language)
    if role == SECONDARY and localized.secondary:
        return localized.secondary
    if role == PRIMARY and localized.primary:
        return localized.primary
    return localized.primary or localized.secondary or ""


def resolve_list(values: Optional[Iterable[Any]], language: Optional[str], languages: Languages = DEFAULT_LANGUAGES) -> List[str]:
    # Length is preserved: consumers map results back by index.
    return [resolve(v, language, languages) for v in (values or [])]


def resolve_map(mapping: Optional[Mapping[str, Any]], language: Optional[str], languages: Languages = DEFAULT_LANGUAGES) -> Dict[str, str]:
    return {key: resolve(v, language, languages) for key, v in (mapping or {}).items()}


def matches_any_language(value: Any, label: str, languages: Languages = DEFAULT_LANGUAGES) -> bool:
    """True when `label` equals the value's text in either language."""
    if not label:
        return False
    localized = to_localized(value, languages)
    if isinstance(localized, Plain):
        return localized.text == label
    return label in (localized.primary, localized.secondary)
