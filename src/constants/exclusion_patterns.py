import re

# Matched as substrings of the accent-folded, lowercased designation, so
# plurals and inflections ("transports", "remises") are caught as well.
NON_PRODUCT_PHRASES = {
    "transport": [
        "frais de port", "port et emballage", "transport", "livraison",
        "acheminement", "fret", "expedition", "franco de port",
        "surcharge carburant", "surcharge gazole", "surcharge energie",
    ],
    "taxes": [
        "tva", "ecotaxe", "eco taxe", "eco participation", "eco contribution",
        "deee", "tgap", "taxe", "contribution environnementale",
    ],
    "fees": [
        "frais de dossier", "frais administratif", "frais de gestion",
        "frais bancaire", "frais financier", "frais de traitement",
        "frais supplementaire", "participation aux frais", "contribution aux frais",
        "commission", "courtage", "penalite", "interets de retard", "majoration",
        "supplement", "forfait", "abonnement", "cotisation",
    ],
    "services": [
        "main d oeuvre", "pose", "installation", "montage",
        "mise en service", "etude", "conseil", "formation",
        "assistance technique", "visite technique", "audit", "expertise",
        "prestation", "intervention", "deplacement", "location",
    ],
    "packaging": [
        "emballage", "conditionnement", "palette", "caisse",
        "carton", "consigne", "caution", "depot de garantie",
    ],
    "insurance": ["assurance", "garantie"],
    "discounts": [
        "remise", "ristourne", "escompte", "rabais", "reduction",
        "promotion", "offre commerciale",
    ],
    "returns": ["reprise", "retour"],
    "down_payment": ["acompte", "avance", "provision"],
}

# Checked before the phrases above; a designation containing one of these is a product.
PRODUCT_EXCEPTIONS = [
    "transport de chaleur",
    "frais bitume",
    "eco membrane",
    "palette de",
    "forfait etancheite",
    "garantie decennale",
    "membrane autocollante",
    "membranes autocollantes",
    "bande d etancheite autocollante",
    "bandes releves autocollantes",
    "film autocollant",
    "armature",
    "toile de renfort",
    "voile de renfort",
    "grille de renfort",
]

PERCENT_TAX_DISCOUNT_PATTERN = re.compile(r"\d+(?:[.,]\d+)?\s*%|\btva\b|\bremise\b")

CREDIT_PATTERN = re.compile(r"^\s*-\s*\d|\bristourne\b|\bcredit\b|\bavoir\b")
