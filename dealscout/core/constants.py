"""
Fixed tables shared across the engine. Tunable numbers live in ``core.config``.
"""

# Reward signals per judgment action (observational bookkeeping, never a scoring input)
REWARD_LIKE: float = 1.0
REWARD_DISLIKE: float = -1.0
REWARD_SAVE: float = 2.0
REWARD_SKIP: float = -0.2

REWARD_SIGNALS: dict[str, float] = {
    "like": REWARD_LIKE,
    "dislike": REWARD_DISLIKE,
    "save": REWARD_SAVE,
    "skip": REWARD_SKIP,
}

# Industry inference: first matching rule wins, checked against lowercased headline + about
DEFAULT_INDUSTRY: str = "Tech"
INDUSTRY_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("AI", ("ai", "machine learning", "artificial")),
    ("Fintech", ("fintech", "financial", "banking")),
    ("Healthcare", ("health", "medical", "bio")),
    ("SaaS", ("saas", "software", "enterprise")),
    ("Crypto", ("crypto", "blockchain", "web3")),
]

# Separator between role and organization in free-form headlines ("CTO at Acme")
HEADLINE_SEPARATOR: str = " at "

SEED_REASON_PREFIX: str = "seed:"

EXPORT_FORMAT: str = "dpo_preference_pairs"
EXPORT_VERSION: str = "1.0.0"

# Explanation bands for "why you might like this"
EXPLAIN_STRONG_MATCH: int = 70
EXPLAIN_POTENTIAL_MATCH: int = 50

# Alternate category spellings accepted by the preference store
CATEGORY_ALIASES: dict[str, str] = {
    "seniority": "role",
    "signal-type": "signal_type",
    "past-organization": "past_organization",
}
