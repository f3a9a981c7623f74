from datetime import datetime, timezone

from loguru import logger

from dealscout.core.config import Settings, settings
from dealscout.core.constants import CATEGORY_ALIASES
from dealscout.models.preference import PreferenceCategory, PreferenceEntry


class InvalidCategoryError(ValueError):
    """Raised when a preference update names a category outside ``PreferenceCategory``."""


def coerce_category(category: PreferenceCategory | str) -> PreferenceCategory:
    if isinstance(category, PreferenceCategory):
        return category
    try:
        return PreferenceCategory(CATEGORY_ALIASES.get(category, category))
    except ValueError:
        allowed = ", ".join(c.value for c in PreferenceCategory)
        raise InvalidCategoryError(f"Unknown preference category {category!r} (expected one of: {allowed})") from None


class PreferenceStore:
    """
    Weighted (category, value) preferences with additive accumulation.

    Design principles:
    - One entry per (category, case-insensitive value); updates mutate in place
    - Weights only grow: += step per judgment
    - Reasons are kept as ordered sets
    - Nothing is removed except by ``reset()``
    """

    def __init__(self, config: Settings | None = None):
        self.step = (config or settings).PREFERENCE_STEP
        self._entries: dict[tuple[PreferenceCategory, str], PreferenceEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries.values()))

    def entries(self) -> list[PreferenceEntry]:
        """Entries in creation order."""
        return list(self._entries.values())

    def get(self, category: PreferenceCategory | str, value: str) -> PreferenceEntry | None:
        return self._entries.get((coerce_category(category), value.casefold()))

    def update(
        self,
        category: PreferenceCategory | str,
        value: str | None,
        is_positive: bool,
        reason: str | None = None,
    ) -> PreferenceEntry | None:
        """
        Add one step of evidence for (category, value).

        Args:
            category: Preference category; unknown categories raise InvalidCategoryError
            value: Feature value, matched case-insensitively; empty values are ignored
            is_positive: Which weight receives the step
            reason: Free-text reason, recorded once per polarity

        Returns:
            The created or updated entry, or None for an empty value
        """
        cat = coerce_category(category)
        if not value or not value.strip():
            return None

        key = (cat, value.casefold())
        entry = self._entries.get(key)
        if entry is None:
            entry = PreferenceEntry(category=cat, value=value)
            self._entries[key] = entry
            logger.debug(f"New preference {cat.value}: {value}")

        if is_positive:
            entry.positive_weight += self.step
            reasons = entry.positive_reasons
        else:
            entry.negative_weight += self.step
            reasons = entry.negative_reasons

        if reason and reason not in reasons:
            reasons.append(reason)

        entry.last_updated = datetime.now(timezone.utc)
        return entry

    def top_preferences(self, limit: int = 5) -> list[PreferenceEntry]:
        """Entries with positive net weight, strongest first."""
        liked = [e for e in self._entries.values() if e.net_weight > 0]
        return sorted(liked, key=lambda e: e.net_weight, reverse=True)[:limit]

    def top_aversions(self, limit: int = 5) -> list[PreferenceEntry]:
        """Entries with negative net weight, strongest aversion first."""
        avoided = [e for e in self._entries.values() if e.net_weight < 0]
        return sorted(avoided, key=lambda e: e.net_weight)[:limit]

    def reset(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} learned preferences")
