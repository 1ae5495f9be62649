FLAGSHIP_BRAND_KEYWORD = "SOPREMA"

SECONDARY_BRAND_KEYWORDS = (
    "ALSAN",
    "ELASTOPHENE",
    "SOPRALENE",
    "SOPRAXPS",
    "SOPRAFIX",
    "SOPRAFLOR",
    "PAVATEX",
    "MAMMOUTH",
    "SOPRASOLAR",
    "SOPRAJOINT",
    "SOPRADUR",
    "EFISARKING",
    "COLPHENE",
    "TEXSELF",
    "VEDAFLEX",
    "VEDATOP",
)
