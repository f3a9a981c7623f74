from dealscout.core.config import Settings, settings
from dealscout.models.candidate import CandidateFeatures
from dealscout.models.preference import PreferenceCategory, PreferenceEntry
from dealscout.services.learning.store import PreferenceStore


class PreferenceBuilder:
    """
    Turns one judgment into preference store updates.

    Same step for every feature of the candidate; no derived features.
    """

    def __init__(self, store: PreferenceStore, config: Settings | None = None):
        self.store = store
        self.settings = config or settings

    def learn_from_features(
        self, features: CandidateFeatures, is_positive: bool, reason: str | None = None
    ) -> list[PreferenceEntry]:
        """
        Accumulate a judgment into the store.

        Args:
            features: Judged candidate
            is_positive: Like (True) or dislike (False)
            reason: Operator's free-text reason

        Returns:
            Entries touched by this judgment
        """
        touched: list[PreferenceEntry] = []

        single_valued = [
            (PreferenceCategory.INDUSTRY, features.industry),
            (PreferenceCategory.ROLE, features.role),
            (PreferenceCategory.REGION, features.region),
            (PreferenceCategory.ORGANIZATION, features.organization),
            (PreferenceCategory.SIGNAL_TYPE, features.signal_type),
        ]
        for category, value in single_valued:
            if value:
                touched.append(self.store.update(category, value, is_positive, reason))

        for tag in features.tags:
            touched.append(self.store.update(PreferenceCategory.TAG, tag, is_positive, reason))

        for organization in features.past_organizations[: self.settings.MAX_PAST_ORGANIZATIONS]:
            touched.append(self.store.update(PreferenceCategory.PAST_ORGANIZATION, organization, is_positive, reason))

        return [entry for entry in touched if entry is not None]
