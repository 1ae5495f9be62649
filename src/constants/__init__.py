from constants.brand_keywords import FLAGSHIP_BRAND_KEYWORD, SECONDARY_BRAND_KEYWORDS
from constants.exclusion_patterns import (
    CREDIT_PATTERN,
    NON_PRODUCT_PHRASES,
    PERCENT_TAX_DISCOUNT_PATTERN,
    PRODUCT_EXCEPTIONS,
)
from constants.text_patterns import (
    MIN_SET_TOKEN_LENGTH,
    MIN_SIGNIFICANT_TOKEN_LENGTH,
    STOPWORDS,
    UNIT_TOKENS,
)

__all__ = [
    "FLAGSHIP_BRAND_KEYWORD",
    "SECONDARY_BRAND_KEYWORDS",
    "NON_PRODUCT_PHRASES",
    "PRODUCT_EXCEPTIONS",
    "PERCENT_TAX_DISCOUNT_PATTERN",
    "CREDIT_PATTERN",
    "UNIT_TOKENS",
    "STOPWORDS",
    "MIN_SIGNIFICANT_TOKEN_LENGTH",
    "MIN_SET_TOKEN_LENGTH",
]
