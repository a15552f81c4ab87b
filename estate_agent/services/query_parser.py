"""
Natural language property query parser

Turns a free-text search phrase ("3 BHK flat under 50 lakh in Panaji") into
the filter dict understood by PropertyStore.

Every dimension is driven by an ordered table and resolved with first_match:
the first entry that hits wins and later entries for the same dimension are
never consulted. Two precedence quirks follow from table order and are kept
as-is:
- "villa" is a house synonym, so a villa query filters on type=house.
- "goa" is listed before "north goa"/"south goa" and shadows them.
"""
import re
from typing import Any, Callable, Dict, Iterable, Optional, Pattern, Tuple, TypeVar

T = TypeVar('T')
R = TypeVar('R')

# (canonical type, synonyms) in priority order
PROPERTY_TYPE_SYNONYMS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("flat", ("flat", "apartment", "bhk")),
    ("house", ("house", "villa", "bungalow")),
    ("plot", ("plot", "land")),
    ("shop", ("shop", "commercial", "showroom")),
    ("office", ("office", "workspace")),
)

BEDROOM_PATTERN: Pattern[str] = re.compile(r"(\d+)\s*bhk", re.IGNORECASE)

PRICE_MULTIPLIERS: Dict[str, int] = {
    "thousand": 1_000,
    "lakh": 100_000,
    "crore": 10_000_000,
}

# Tried in order; group 1 is the amount, group 2 the unit word
PRICE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"under\s*(\d+)\s*(lakh|crore|thousand)", re.IGNORECASE),
    re.compile(r"below\s*(\d+)\s*(lakh|crore|thousand)", re.IGNORECASE),
    re.compile(r"(\d+)\s*(lakh|crore|thousand)\s*budget", re.IGNORECASE),
)

KNOWN_LOCATIONS: Tuple[str, ...] = (
    "goa", "north goa", "south goa", "panaji", "margao", "mapusa",
    "ponda", "vasco", "calangute", "baga", "anjuna",
)

# (forSale value, keywords); rental intent is checked first
TRANSACTION_KEYWORDS: Tuple[Tuple[bool, Tuple[str, ...]], ...] = (
    (False, ("rent", "rental")),
    (True, ("buy", "sale", "purchase")),
)


def first_match(entries: Iterable[T], pick: Callable[[T], Optional[R]]) -> Optional[R]:
    """Return the first non-None pick result over entries, or None."""
    for entry in entries:
        result = pick(entry)
        if result is not None:
            return result
    return None


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def detect_property_type(query_lower: str) -> Optional[str]:
    return first_match(
        PROPERTY_TYPE_SYNONYMS,
        lambda entry: entry[0] if _contains_any(query_lower, entry[1]) else None,
    )


def detect_bedrooms(query_lower: str) -> Optional[int]:
    match = BEDROOM_PATTERN.search(query_lower)
    return int(match.group(1)) if match else None


def _price_from_pattern(pattern: Pattern[str], query_lower: str) -> Optional[int]:
    match = pattern.search(query_lower)
    if not match:
        return None
    return int(match.group(1)) * PRICE_MULTIPLIERS[match.group(2).lower()]


def detect_price_ceiling(query_lower: str) -> Optional[int]:
    return first_match(PRICE_PATTERNS, lambda pattern: _price_from_pattern(pattern, query_lower))


def detect_location(query_lower: str) -> Optional[str]:
    return first_match(
        KNOWN_LOCATIONS,
        lambda location: location if location in query_lower else None,
    )


def detect_transaction(query_lower: str) -> Optional[bool]:
    return first_match(
        TRANSACTION_KEYWORDS,
        lambda entry: entry[0] if _contains_any(query_lower, entry[1]) else None,
    )


class QueryParser:
    """Maps a free-text search phrase to a structured property filter"""

    def parse(self, query_text: str) -> Dict[str, Any]:
        """
        Parse a natural language query.

        Args:
            query_text: raw text typed by the user

        Returns:
            {
                "isAvailable": True,
                "type": "flat",             # optional
                "bedrooms": 3,              # optional
                "price": {"lte": 5000000},  # optional
                "location": "panaji",       # optional, matches location or city
                "forSale": True             # optional
            }
        """
        query_lower = (query_text or "").lower()
        filters: Dict[str, Any] = {"isAvailable": True}

        property_type = detect_property_type(query_lower)
        if property_type is not None:
            filters["type"] = property_type

        bedrooms = detect_bedrooms(query_lower)
        if bedrooms is not None:
            filters["bedrooms"] = bedrooms

        ceiling = detect_price_ceiling(query_lower)
        if ceiling is not None:
            filters["price"] = {"lte": ceiling}

        location = detect_location(query_lower)
        if location is not None:
            filters["location"] = location

        for_sale = detect_transaction(query_lower)
        if for_sale is not None:
            filters["forSale"] = for_sale

        return filters


def parse_property_query(query_text: str) -> Dict[str, Any]:
    """Module-level shortcut for QueryParser().parse"""
    return QueryParser().parse(query_text)
