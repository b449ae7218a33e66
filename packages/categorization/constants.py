"""Category constants for transaction classification.

Defines the category labels suggested for imported statement rows and the
default keyword table used to pick them. The table is an ordered list: the
first rule with a matching keyword wins, so rules must stay in this order.
"""

from enum import Enum
from typing import List, Tuple


class Category(str, Enum):
    """Standard transaction categories for classification."""

    CIBO = "cibo"
    TRASPORTI = "trasporti"
    CASA = "casa"
    ABBONAMENTI = "abbonamenti"
    SALUTE = "salute"
    SVAGO = "svago"
    VIAGGI = "viaggi"
    ANIMALI = "animali"
    VARIE = "varie"


DEFAULT_CATEGORY = Category.VARIE.value

# (label, keywords) pairs; keywords are lowercase substrings
DEFAULT_CATEGORY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    (
        Category.CIBO.value,
        (
            "supermercato",
            "carrefour",
            "conad",
            "coop",
            "esselunga",
            "lidl",
            "eurospin",
            "ristorante",
            "pizzeria",
            "bar",
            "caffè",
            "mcdonald",
            "burger",
            "deliveroo",
            "glovo",
            "just eat",
            "uber eats",
        ),
    ),
    (
        Category.TRASPORTI.value,
        (
            "benzina",
            "eni",
            "q8",
            "ip",
            "tamoil",
            "autostrada",
            "telepass",
            "trenitalia",
            "italo",
            "atm",
            "metro",
            "autobus",
            "taxi",
            "uber",
            "bolt",
            "parking",
            "parcheggio",
        ),
    ),
    (
        Category.CASA.value,
        (
            "affitto",
            "mutuo",
            "condominio",
            "ikea",
            "leroy merlin",
            "bricofer",
            "enel",
            "eni gas",
            "a2a",
            "hera",
            "acquedotto",
        ),
    ),
    (
        Category.ABBONAMENTI.value,
        (
            "netflix",
            "spotify",
            "amazon prime",
            "disney",
            "dazn",
            "tim",
            "vodafone",
            "wind",
            "iliad",
            "fastweb",
            "sky",
            "now tv",
            "apple",
            "google",
            "microsoft",
        ),
    ),
    (
        Category.SALUTE.value,
        (
            "farmacia",
            "parafarmacia",
            "medico",
            "dentista",
            "ospedale",
            "clinica",
            "analisi",
            "visita",
        ),
    ),
    (
        Category.SVAGO.value,
        (
            "cinema",
            "teatro",
            "concerto",
            "palestra",
            "sport",
            "amazon",
            "zalando",
            "shein",
            "aliexpress",
        ),
    ),
    (
        Category.VIAGGI.value,
        (
            "hotel",
            "booking",
            "airbnb",
            "ryanair",
            "easyjet",
            "alitalia",
            "aeroporto",
            "volo",
        ),
    ),
    (
        Category.ANIMALI.value,
        ("veterinario", "pet", "arcaplanet", "zooplus"),
    ),
]
