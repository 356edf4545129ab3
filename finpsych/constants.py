"""
Calibrated constants for the CWI scoring engine.

Centralizes every lookup table the scoring stages read: question-to-construct
mapping, reverse-scored items, answer vocabularies, population statistics,
5Cs mapping and weights, country calibration and risk bands.

IMPORTANT: These are calibrated constants from offline PCA analysis.
Any change to a weight, threshold or mapping must bump MODEL_VERSION so that
stored scores stay attributable to the tables that produced them.

All tables are read-only (MappingProxyType / tuple / frozenset).
"""

from types import MappingProxyType

# =============================================================================
# Model Version (semver)
# =============================================================================
# History:
#   1.0.0: z-score 5Cs, PCA-weighted inside categories
#   1.1.0: neurocognitive constructs (CRT, delay discounting, numeracy, LCA)
#   1.2.0: raw-mean 5Cs on 0-100, null categories, LCA overflow guard,
#          country calibration on the 0-100 scale
MODEL_VERSION = "1.2.0"

# -----------------------------------------------------------------------------
# PCA weights (construct level), absolute PC1 loadings normalized, sum = 1.00
# Reserved for the alternate PCA-weighted model; not used by the active CWI.
# -----------------------------------------------------------------------------
PCA_WEIGHTS = MappingProxyType({
    "financial_behaviour": 0.20,
    "payment_history": 0.15,
    "self_control": 0.12,
    "conscientiousness": 0.11,
    "cognitive_reflection": 0.08,
    "emotional_stability": 0.08,
    "risk_preference": 0.07,
    "financial_numeracy": 0.06,
    "locus_of_control": 0.05,
    "delay_discounting": 0.04,
    "social_support": 0.04,
})

# -----------------------------------------------------------------------------
# Population statistics (calibration dataset) for construct z-scores
# -----------------------------------------------------------------------------
GLOBAL_STATS = MappingProxyType({
    # Character
    "self_control": (3.28, 0.78),
    "conscientiousness": (3.65, 0.71),
    "agreeableness": (3.55, 0.68),
    "emotional_stability": (2.85, 0.88),
    "extraversion": (3.15, 0.89),
    # Capacity
    "payment_history": (2.10, 0.95),
    "financial_management": (3.45, 0.82),
    "crisis_management": (3.20, 0.90),
    "financial_integrity": (3.50, 0.85),
    # Capital
    "emergency_preparedness": (2.80, 1.05),
    # Collateral
    "social_collateral": (2.45, 1.12),
    # Conditions
    "openness": (3.42, 0.75),
    "future_orientation": (3.40, 0.85),
    "risk_preference": (2.95, 0.92),
    "locus_of_control": (0.72, 0.25),  # binary items
    # Neurocognitive (not part of the 5Cs)
    "cognitive_reflection": (0.35, 0.48),
    "delay_discounting": (0.45, 0.50),
    "financial_numeracy": (0.70, 0.35),
    "loan_consequence_awareness": (2.0, 0.8),
})

# Fallback for constructs missing from GLOBAL_STATS
DEFAULT_CONSTRUCT_MEAN = 3.0
DEFAULT_CONSTRUCT_STD = 1.0

# -----------------------------------------------------------------------------
# Country calibration for cross-country fairness, on the 0-100 CWI scale.
# Derived from the z-unit offsets of 1.1.0 as mean = 55 + 15 x offset,
# std = 15 x spread (population CWI: mean 55, SD 15).
# -----------------------------------------------------------------------------
FALLBACK_COUNTRY = "Other"

COUNTRY_STATS = MappingProxyType({
    "Nigeria": (53.35, 13.80),
    "Kenya": (54.40, 13.35),
    "Ghana": (53.80, 14.10),
    "South Africa": (55.75, 14.40),
    "United States": (56.80, 15.30),
    "USA": (56.80, 15.30),
    "United Kingdom": (56.20, 14.70),
    "UK": (56.20, 14.70),
    "Canada": (56.50, 15.00),
    FALLBACK_COUNTRY: (55.00, 15.00),
})

# -----------------------------------------------------------------------------
# 5Cs mapping. Neurocognitive constructs are not mapped (NCI only).
# -----------------------------------------------------------------------------
FIVE_C_CATEGORIES = ("character", "capacity", "capital", "collateral", "conditions")

FIVE_C_MAP = MappingProxyType({
    "character": (
        "self_control",
        "conscientiousness",
        "agreeableness",
        "emotional_stability",
        "extraversion",
    ),
    "capacity": (
        "payment_history",
        "financial_management",
        "crisis_management",
        "financial_integrity",
    ),
    "capital": ("emergency_preparedness",),
    "collateral": ("social_collateral",),
    "conditions": (
        "future_orientation",
        "risk_preference",
        "locus_of_control",
        "openness",
    ),
})

FIVE_C_WEIGHTS = MappingProxyType({
    "character": 0.20,
    "capacity": 0.20,
    "capital": 0.20,
    "collateral": 0.20,
    "conditions": 0.20,
})

# Raw Likert range rescaled to 0-100
LIKERT_MIN = 1.0
LIKERT_MAX = 5.0

# -----------------------------------------------------------------------------
# Risk bands: descending percentile thresholds, first match wins
# -----------------------------------------------------------------------------
RISK_BANDS = (
    ("LOW", 0.75),
    ("MODERATE", 0.40),
    ("HIGH", 0.15),
    ("VERY_HIGH", 0.00),
)

# z-score range mapped onto 0-100
Z_SCORE_FLOOR = -3.0
Z_SCORE_CEILING = 3.0

# -----------------------------------------------------------------------------
# Answer vocabularies
# -----------------------------------------------------------------------------
LIKERT_MAP = MappingProxyType({
    "Never": 1,
    "Rarely": 2,
    "Sometimes": 3,
    "Often": 4,
    "Always": 5,
    "Very often": 5,
})

LIKELIHOOD_MAP = MappingProxyType({
    "Very unlikely": 1,
    "Unlikely": 2,
    "Neutral": 3,
    "Likely": 4,
    "Very likely": 5,
})

LIKERT_DEFAULT = 3

# Answers beginning with this marker are treated as skipped
NOT_APPLICABLE_PREFIX = "N/A"
DEMOGRAPHIC_PREFIX = "dem"

# -----------------------------------------------------------------------------
# Question → construct
# -----------------------------------------------------------------------------
_QUESTION_GROUPS = {
    # Character
    "self_control": ("q47", "q48", "q49", "q51", "q52", "q53"),
    "conscientiousness": ("q17", "q18", "q19", "q20", "q21"),
    "agreeableness": ("q27", "q28", "q29", "q30", "q31"),
    "emotional_stability": ("q22", "q23", "q24", "q25", "q26"),
    "extraversion": ("q37", "q38", "q39", "q40", "q41"),
    # Capacity (q10 "I pay my bills on time" is not reversed)
    "payment_history": ("q1", "q2", "q3", "q4", "q5", "q10"),
    "financial_management": ("q7", "q8", "q9", "q11", "q12", "q13"),
    "crisis_management": ("q6", "q16", "q50"),
    "financial_integrity": ("q16a", "q16c", "q16d", "q16f"),
    # Capital (q14 is the legacy single-choice form of q14a-c)
    "emergency_preparedness": ("q14", "q14a", "q14b", "q14c", "q15"),
    # Collateral
    "social_collateral": ("q59", "q16b", "q16e"),
    # Conditions
    "openness": ("q32", "q33", "q34", "q35", "q36"),
    "future_orientation": ("q60", "q61"),
    "risk_preference": ("q42", "q43", "q44", "q45", "q46"),
    "locus_of_control": ("q54", "q55", "q56", "q57", "q58"),
    # Neurocognitive (NCI only)
    "cognitive_reflection": ("q62",),
    "delay_discounting": ("q63",),
    "financial_numeracy": (
        "q64", "q65",
        "asfn1_1", "asfn1_2", "asfn1_3", "asfn1_4", "asfn1_5",
        "asfn2_1", "asfn2_2", "asfn2_3", "asfn2_4", "asfn2_5",
    ),
    "loan_consequence_awareness": ("lca1", "lca2", "lca3", "lca4", "lca5"),
    # Cross-validation only, never scored
    "gaming_detection": ("gd1", "gd2", "gd3", "gd4", "gd5", "gd6", "gd7", "gd8", "gd9"),
}

QUESTION_CONSTRUCT_MAP = MappingProxyType({
    question_id: construct
    for construct, question_ids in _QUESTION_GROUPS.items()
    for question_id in question_ids
})

# Negatively framed items (higher raw = worse outcome)
REVERSE_SCORED_QUESTIONS = frozenset({
    "q1", "q2", "q3", "q4", "q5",       # missed payments
    "q6",                               # renegotiating with lender
    "q22", "q23", "q24", "q25", "q26",  # stress / anxiety
    "q48", "q49",                       # impulsivity
    "q16c", "q16d",                     # skip payments / prioritise other expenses
    "q14c",                             # take a loan
})

# -----------------------------------------------------------------------------
# Locus of control: first option of each pair is internal (1), else 0
# -----------------------------------------------------------------------------
LOCUS_INTERNAL_ANSWERS = frozenset({
    "My financial security depends mainly on my own actions.",
    "Financial planning helps me achieve goals.",
    "Financial success comes from hard work.",
    "I can achieve the financial goals I set.",
    "I am responsible for my financial well-being.",
})

# Keyword form used by the consistency checks (tolerates reworded options)
LOCUS_INTERNAL_KEYWORDS = ("own actions", "planning helps", "hard work", "can achieve", "responsible")

# -----------------------------------------------------------------------------
# Emergency preparedness / social collateral ordinal tables
# -----------------------------------------------------------------------------
EMERGENCY_MONTHS_QUESTION = "q15"
EMERGENCY_SOURCE_QUESTION = "q14"
SOCIAL_COUNT_QUESTION = "q59"

EMERGENCY_MONTHS_SCORES = MappingProxyType({
    "None": 1,
    "1 month": 2,
    "2–3 months": 3,
    "4–6 months": 4,
    "More than 6 months": 5,
})
EMERGENCY_MONTHS_DEFAULT = 3

EMERGENCY_SOURCE_SCORES = MappingProxyType({
    "Personal savings": 5,
    "Borrow from family/friends": 3,
    "Sell an asset": 2,
    "Take a loan": 1,
    "Other": 2,
})
EMERGENCY_SOURCE_DEFAULT = 2

SOCIAL_SUPPORT_SCORES = MappingProxyType({
    "None": 1,
    "1–2 people": 2,
    "3–5 people": 3,
    "6–10 people": 4,
    "More than 10": 5,
})
SOCIAL_SUPPORT_DEFAULT = 3

# -----------------------------------------------------------------------------
# Crisis decision-making ranking (q16)
# -----------------------------------------------------------------------------
CRISIS_RANKING_QUESTION = "q16"
CRISIS_RANKING_ITEMS = (
    "Contact lender",
    "Borrow from family/friends",
    "Skip payments",
    "Prioritise other expenses",
    "Sell assets",
    "Work extra hours",
)
CRISIS_CONTACT_LENDER = "Contact lender"
CRISIS_SKIP_PAYMENTS = "Skip payments"
CRISIS_BASE_SCORE = 3.0
CRISIS_CONTACT_WEIGHT = 0.3
CRISIS_SKIP_WEIGHT = 0.2

# -----------------------------------------------------------------------------
# Neurocognitive items
# -----------------------------------------------------------------------------
# Bat and ball: total 1,100, bat costs 1,000 more → ball costs 50 (not 100)
COGNITIVE_REFLECTION_CORRECT = 50.0
CURRENCY_SYMBOLS = "₦$£€"

# Delayed option of "A: ₦5,000 today" vs "B: ₦7,500 in one month"
DELAY_DISCOUNTING_PATIENT_MARKERS = ("7,500", "B:")

FINANCIAL_NUMERACY_CORRECT = MappingProxyType({
    "q64": "₦700",
    "q65": "Lender A (₦5,000 interest)",
})

ASFN_CORRECT_ANSWERS = MappingProxyType({
    # Level 1: functional numeracy
    "asfn1_1": "B) Two $20 bills",
    "asfn1_2": "A) $5",
    "asfn1_3": "A) $15",
    "asfn1_4": "C) $12",
    "asfn1_5": "A) Shop B",
    # Level 2: financial comparison
    "asfn2_1": "A) Lender A",
    "asfn2_2": "A) Option A",
    "asfn2_3": "B) $450",
    "asfn2_4": "B) Plan B",
    "asfn2_5": "B) Less groceries",
})
ASFN_PREFIX = "asfn"

# -----------------------------------------------------------------------------
# Loan consequence awareness: points by option prefix, best answer = 3
# -----------------------------------------------------------------------------
LCA_POINTS = MappingProxyType({
    "lca1": MappingProxyType({"A)": 3, "B)": 1, "C)": 0, "D)": 2}),
    "lca2": MappingProxyType({"A)": 0, "B)": 1, "C)": 3, "D)": 2}),
    "lca3": MappingProxyType({"A)": 3, "B)": 2, "C)": 1, "D)": 0}),
    "lca4": MappingProxyType({"A)": 1, "B)": 3, "C)": 0, "D)": 2}),
    "lca5": MappingProxyType({"A)": 0, "B)": 1, "C)": 3, "D)": 0}),
})
LCA_MAX_POINTS_PER_QUESTION = 3
LCA_MAX_RAW_SCORE = 15  # 5 questions x 3 points

# -----------------------------------------------------------------------------
# NCI
# -----------------------------------------------------------------------------
NCI_ASFN_WEIGHT = 0.5
NCI_LCA_WEIGHT = 0.5
ASFN_TIERS = (
    ("HIGH", 75.0),
    ("MEDIUM", 50.0),
    ("LOW", 0.0),
)
