import re

UNIT_TOKENS = frozenset({"MM", "CM", "M", "KG", "G", "L", "M2", "M3"})

STOPWORDS = frozenset({
    "THE", "AND", "FOR", "WITH", "FROM",
    "PAR", "POUR", "AVEC", "SANS", "DES", "LES", "UNE", "SUR", "AUX",
})

MIN_SIGNIFICANT_TOKEN_LENGTH = 3
MIN_SET_TOKEN_LENGTH = 2

NON_ALPHANUMERIC = re.compile(r"[^A-Z0-9]+")
WHITESPACE = re.compile(r"\s+")
