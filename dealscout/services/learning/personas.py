from loguru import logger
from pydantic import BaseModel, Field

from dealscout.core.constants import SEED_REASON_PREFIX
from dealscout.models.preference import PreferenceCategory
from dealscout.services.learning.state import EngineState


class PersonaRecipe(BaseModel):
    """Named bundle of seed preferences for one investment thesis."""

    id: str
    name: str
    description: str = ""
    positive_highlights: list[str] = Field(default_factory=list)
    negative_highlights: list[str] = Field(default_factory=list)
    red_flags: list[str] = Field(default_factory=list)
    industry_focus: list[str] = Field(default_factory=list)
    region_focus: list[str] = Field(default_factory=list)
    signal_focus: list[str] = Field(default_factory=list)

    @property
    def seed_reason(self) -> str:
        return f"{SEED_REASON_PREFIX}{self.id}"


EARLY_STAGE_RECIPE = PersonaRecipe(
    id="early",
    name="Early Stage VC",
    description="Pre-seed to Seed investors looking for exceptional founders",
    positive_highlights=[
        "serial_founder",
        "prior_exit",
        "yc_alumni",
        "techstars_alumni",
        "unicorn_experience",
        "fortune_500_experience",
        "vc_backed_experience",
        "stanford_alumni",
        "mit_alumni",
        "harvard_alumni",
        "phd_holder",
        "technical_background",
        "product_leader",
        "growth_leader",
        "domain_expert",
        "repeat_ceo",
        "scaled_team",
        "raised_funding",
    ],
    negative_highlights=[
        "no_linkedin",
        "career_gap",
        "short_tenure",
        "no_technical_background",
        "no_startup_experience",
    ],
    red_flags=["stealth_only", "no_experience", "junior_level", "consultant_only"],
    signal_focus=["new_founder", "spinout", "repeat_founder"],
)

GROWTH_STAGE_RECIPE = PersonaRecipe(
    id="growth",
    name="Growth Stage VC",
    description="Series A to C investors looking for proven operators",
    positive_highlights=[
        "scaled_company",
        "revenue_growth",
        "team_builder",
        "market_leader",
        "category_creator",
        "enterprise_sales",
        "international_expansion",
        "public_company_experience",
        "board_experience",
        "cfo_experience",
        "coo_experience",
        "vp_engineering",
        "vp_sales",
        "vp_marketing",
        "ipo_experience",
    ],
    negative_highlights=["early_stage_only", "no_scale_experience", "single_company", "small_team_only"],
    red_flags=["no_revenue_experience", "no_enterprise_experience", "startup_hopper"],
)

PE_RECIPE = PersonaRecipe(
    id="pe",
    name="Private Equity",
    description="PE investors looking for operational excellence",
    positive_highlights=[
        "fortune_500_executive",
        "turnaround_experience",
        "cost_optimization",
        "margin_improvement",
        "ma_experience",
        "integration_experience",
        "pe_backed_company",
        "ceo_experience",
        "cfo_experience",
        "coo_experience",
        "board_director",
        "industry_veteran",
        "operational_excellence",
        "ebitda_growth",
        "debt_management",
    ],
    negative_highlights=["startup_only", "no_p_and_l", "no_board_exposure", "tech_only"],
    red_flags=["no_corporate_experience", "junior_roles_only", "no_financial_acumen"],
)

IB_RECIPE = PersonaRecipe(
    id="ib",
    name="Investment Banker",
    description="IB professionals looking for M&A and IPO candidates",
    positive_highlights=[
        "market_leader",
        "category_leader",
        "high_growth",
        "profitable",
        "recurring_revenue",
        "strategic_asset",
        "ipo_ready",
        "acquisition_target",
        "strong_moat",
        "network_effects",
        "platform_play",
        "roll_up_potential",
        "international_presence",
        "blue_chip_customers",
        "regulatory_advantage",
    ],
    negative_highlights=["early_stage", "pre_revenue", "single_product", "concentrated_revenue"],
    red_flags=["declining_growth", "no_clear_exit", "regulatory_risk", "founder_dependent"],
)

PERSONA_RECIPES: dict[str, PersonaRecipe] = {
    recipe.id: recipe for recipe in (EARLY_STAGE_RECIPE, GROWTH_STAGE_RECIPE, PE_RECIPE, IB_RECIPE)
}


def get_recipe(persona_id: str) -> PersonaRecipe:
    recipe = PERSONA_RECIPES.get(persona_id)
    if recipe is None:
        raise ValueError(f"Unknown persona {persona_id!r} (available: {', '.join(PERSONA_RECIPES)})")
    return recipe


def seed_persona(state: EngineState, recipe: PersonaRecipe) -> int:
    """
    Merge a recipe into the preference store using ordinary update semantics.

    Every update carries the synthetic ``seed:<id>`` reason. Red flags get
    ``RED_FLAG_SEED_STEPS`` negative steps instead of one.

    Returns:
        Number of store updates applied
    """
    reason = recipe.seed_reason
    updates: list[tuple[PreferenceCategory, str, bool]] = []

    updates += [(PreferenceCategory.TAG, tag, True) for tag in recipe.positive_highlights]
    updates += [(PreferenceCategory.TAG, tag, False) for tag in recipe.negative_highlights]
    for tag in recipe.red_flags:
        updates += [(PreferenceCategory.TAG, tag, False)] * state.settings.RED_FLAG_SEED_STEPS
    updates += [(PreferenceCategory.INDUSTRY, value, True) for value in recipe.industry_focus]
    updates += [(PreferenceCategory.REGION, value, True) for value in recipe.region_focus]
    updates += [(PreferenceCategory.SIGNAL_TYPE, value, True) for value in recipe.signal_focus]

    applied = 0
    for category, value, is_positive in updates:
        if state.store.update(category, value, is_positive, reason) is not None:
            applied += 1

    state.persona_id = recipe.id
    logger.info(f"Seeded persona '{recipe.name}' with {applied} preference updates")
    return applied
