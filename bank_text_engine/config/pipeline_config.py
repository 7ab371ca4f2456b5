"""
Pipeline configuration for bank-text transaction extraction and deduplication.
Contains extraction defaults, matching tolerances, and scoring weights.
"""

# Extraction Configuration
EXTRACTION_CONFIG = {
    # Calendar dates are taken in this zone; time-of-day is discarded
    "reference_timezone": "UTC",

    # Used when capture group 2 is absent or empty
    "default_descriptions": {
        "expense": "Payment",
        "income": "Credit",
        "transfer": "Transfer",
    },

    # Bank-keyword detection on merchant names (transfer-likely flag)
    "bank_keyword_fuzzy_threshold": 90,  # rapidfuzz partial_ratio, 0-100
    "bank_keyword_min_fuzzy_length": 6,  # shorter keywords only match exactly
}

# Duplicate Matching Configuration
# Tolerances for linking a bank-detected candidate to a recurrence-generated expense
MATCHING_CONFIG = {
    # Hard gates
    "amount_tolerance": 0.05,  # ±5% of the target amount
    "date_tolerance_days": 7,  # ±7 days, inclusive

    # Description gate
    "min_description_similarity": 0.4,

    # Description gate is waived when amount and date are both this close
    "strong_amount_score": 0.9,
    "strong_date_score": 0.7,

    # Floor for the amount threshold so zero-amount targets do not divide by zero
    "min_amount_threshold": 0.01,

    # Final score weights (total = 1.0)
    "weights": {
        "amount": 0.4,
        "date": 0.3,
        "description": 0.3,
    },

    # Similarity returned when one description contains the other
    "containment_score": 0.85,

    # Frequency value carried by materialized (non-template) recurring entries
    "eligible_frequency": "single",
}
