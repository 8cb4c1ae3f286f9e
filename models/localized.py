"""Values that may differ per language."""

from dataclasses import dataclass
from typing import Dict, Generic, Optional, Tuple, TypeVar

from .constants import DEFAULT_LOCALE, LOCALES, MISSING_TRANSLATION_PLACEHOLDERS

T = TypeVar("T")


@dataclass(frozen=True)
class LocalizedValue(Generic[T]):
    """
    A value keyed by locale.

    Finnish is mandatory. Swedish and English are optional and fall back to
    Finnish when read with pick(). A field that is absent altogether is None
    on the entity, never a LocalizedValue of empty strings.
    """

    fi: T
    sv: Optional[T] = None
    en: Optional[T] = None

    def get(self, locale: str) -> Optional[T]:
        """Return the value stored for locale, without fallback."""
        if locale not in LOCALES:
            return None
        return getattr(self, locale)

    def pick(self, locale: str) -> T:
        """Return the value for locale, falling back to Finnish."""
        value = self.get(locale)
        if _is_blank(value):
            return self.fi
        return value

    def pick_strict(self, locale: str) -> str:
        """Return the value for locale or a missing-translation placeholder."""
        value = self.get(locale)
        if _is_blank(value):
            return MISSING_TRANSLATION_PLACEHOLDERS.get(
                locale, MISSING_TRANSLATION_PLACEHOLDERS[DEFAULT_LOCALE]
            )
        return value

    def pick_with_indicator(self, locale: str) -> Tuple[T, bool]:
        """
        Return (value, is_missing).

        is_missing is True when the requested locale had no value and the
        Finnish value (or a placeholder) was returned instead.
        """
        value = self.get(locale)
        if not _is_blank(value):
            return value, False
        if not _is_blank(self.fi):
            return self.fi, True
        return MISSING_TRANSLATION_PLACEHOLDERS.get(locale, ""), True

    def has_translation(self, locale: str) -> bool:
        return not _is_blank(self.get(locale))

    def to_dict(self) -> Dict[str, T]:
        return {
            locale: getattr(self, locale)
            for locale in LOCALES
            if getattr(self, locale) is not None
        }

    @classmethod
    def from_values(cls, values: Dict[str, Optional[T]]) -> Optional["LocalizedValue[T]"]:
        """
        Build from a locale->value dict, or return None when nothing is set.

        When Finnish is missing but another locale has a value, the first
        available value (in locale order) fills the mandatory slot.
        """
        present = {
            locale: values.get(locale)
            for locale in LOCALES
            if not _is_blank(values.get(locale))
        }
        if not present:
            return None

        fi = present.get(DEFAULT_LOCALE)
        if fi is None:
            fi = next(iter(present.values()))
        return cls(fi=fi, sv=present.get("sv"), en=present.get("en"))


def lpick(value: Optional[LocalizedValue], locale: str) -> str:
    """Pick a localized string, returning "" when the field is absent."""
    if value is None:
        return ""
    picked = value.pick(locale)
    return picked if picked is not None else ""


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False
