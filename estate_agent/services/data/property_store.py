"""
Property catalog store (PostgreSQL)
"""
import json
import logging
import math
from typing import Any, Dict, List, Optional, Tuple
from estate_agent.db.schema import AREA_UNITS, PROPERTY_TYPES
from estate_agent.services.data.executor import execute_sql_safe, execute_write, to_jsonable

logger = logging.getLogger(__name__)

PROPERTY_COLUMNS = (
    "id, title, type, location, city, state, bedrooms, bathrooms, area_value, area_unit, "
    "price, for_sale, amenities, description, owner_contact, is_available, date_added"
)

# Sort keys accepted by build_filter_query
ORDER_BY_CLAUSES = {
    "price_asc": "price ASC, id ASC",
    "price_desc": "price DESC, id ASC",
    "newest": "date_added DESC, id DESC",
}


class PropertyNotFoundError(LookupError):
    """Raised when a referenced property id does not exist"""

    def __init__(self, property_id: Any):
        super().__init__(f"Property not found: {property_id}")
        self.property_id = property_id


class PropertyValidationError(ValueError):
    """Raised when a property payload cannot be stored"""


def serialize_property(row: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a DB row into a JSON-safe property dict"""
    record = {key: to_jsonable(value) for key, value in row.items()}
    record["area"] = {"value": record.pop("area_value", None), "unit": record.pop("area_unit", "sqft")}
    record["amenities"] = list(record.get("amenities") or [])
    return record


def _parse_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def _parse_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _like_contains(term: str) -> str:
    """ILIKE pattern matching term literally anywhere (backslash is the default escape)"""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def listing_filters(
    property_type: Optional[str] = None,
    location: Optional[str] = None,
    max_price: Any = None,
    bedrooms: Any = None,
    for_sale: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Build a filter from explicit fields (catalog listing / recommendations).

    Same shape as QueryParser output so both paths share build_filter_query.
    """
    filters: Dict[str, Any] = {"isAvailable": True}
    if property_type:
        filters["type"] = property_type
    if location:
        filters["location"] = location
    ceiling = _parse_int(max_price)
    if ceiling is not None:
        filters["price"] = {"lte": ceiling}
    bedroom_count = _parse_int(bedrooms)
    if bedroom_count is not None:
        filters["bedrooms"] = bedroom_count
    if for_sale is not None:
        filters["forSale"] = _parse_bool(for_sale, True)
    return filters


class PropertyStore:
    """Read/write access to the properties table"""

    @staticmethod
    def build_filter_query(
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
    ) -> Tuple[str, Dict[str, Any]]:
        """
        Build a parameterized SELECT for a property filter.

        Args:
            filters: filter dict
                {
                    "isAvailable": True,
                    "type": "flat",
                    "bedrooms": 2,
                    "price": {"lte": 5000000},
                    "location": "panaji",
                    "forSale": False
                }
            limit: max rows
            order_by: key of ORDER_BY_CLAUSES

        Returns:
            (query, params) tuple
        """
        where_conditions = []
        params: Dict[str, Any] = {}

        # Availability is always enforced
        where_conditions.append("is_available = %(is_available)s")
        params["is_available"] = True

        if filters.get("type"):
            where_conditions.append("type = %(type)s")
            params["type"] = filters["type"]

        if filters.get("bedrooms") is not None:
            where_conditions.append("bedrooms = %(bedrooms)s")
            params["bedrooms"] = int(filters["bedrooms"])

        price = filters.get("price")
        if isinstance(price, dict) and price.get("lte") is not None:
            where_conditions.append("price <= %(price_max)s")
            params["price_max"] = int(price["lte"])

        if filters.get("location"):
            where_conditions.append("(location ILIKE %(location)s OR city ILIKE %(location)s)")
            params["location"] = _like_contains(str(filters["location"]))

        if filters.get("forSale") is not None:
            where_conditions.append("for_sale = %(for_sale)s")
            params["for_sale"] = bool(filters["forSale"])

        query = f"SELECT {PROPERTY_COLUMNS} FROM properties WHERE {' AND '.join(where_conditions)}"

        if order_by:
            if order_by not in ORDER_BY_CLAUSES:
                raise ValueError(f"Unsupported sort key: {order_by}")
            query += f" ORDER BY {ORDER_BY_CLAUSES[order_by]}"

        if limit is not None:
            query += " LIMIT %(limit)s"
            params["limit"] = int(limit)

        return query, params

    def find(
        self,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Return available properties matching the filter"""
        query, params = self.build_filter_query(filters, limit=limit, order_by=order_by)
        logger.debug("Property query: %s params=%s", query, params)
        rows = execute_sql_safe(query, params)
        return [serialize_property(row) for row in rows]

    def find_by_id(self, property_id: Any) -> Optional[Dict[str, Any]]:
        """Return one property regardless of availability, or None"""
        pid = _parse_int(property_id)
        if pid is None:
            return None
        rows = execute_sql_safe(
            f"SELECT {PROPERTY_COLUMNS} FROM properties WHERE id = %(id)s",
            {"id": pid},
        )
        return serialize_property(rows[0]) if rows else None

    def count(self) -> int:
        rows = execute_sql_safe("SELECT COUNT(*) AS total FROM properties")
        return int(rows[0]["total"]) if rows else 0

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and insert a property, returning the stored row"""
        record = self.validate(payload)
        rows = execute_write(
            f"""
            INSERT INTO properties (
                title, type, location, city, state, bedrooms, bathrooms, area_value, area_unit,
                price, for_sale, amenities, description, owner_contact, is_available
            ) VALUES (
                %(title)s, %(type)s, %(location)s, %(city)s, %(state)s, %(bedrooms)s, %(bathrooms)s,
                %(area_value)s, %(area_unit)s, %(price)s, %(for_sale)s, %(amenities)s,
                %(description)s, %(owner_contact)s, %(is_available)s
            )
            RETURNING {PROPERTY_COLUMNS}
            """,
            record,
            fetch=True,
        )
        created = serialize_property(rows[0])
        logger.info("Property created: id=%s title=%s", created["id"], created["title"])
        return created

    def seed_if_empty(self, samples: List[Dict[str, Any]]) -> int:
        """Insert sample listings into an empty catalog; returns inserted count"""
        if self.count() > 0:
            return 0
        logger.info("Seeding %d sample properties", len(samples))
        for sample in samples:
            self.create(sample)
        return len(samples)

    @staticmethod
    def validate(payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Check a property payload and map it onto table columns.

        Accepts both camelCase (forSale, ownerContact, isAvailable) and
        snake_case keys.
        """
        if not isinstance(payload, dict):
            raise PropertyValidationError("Property payload must be an object")

        for field in ("title", "type", "location", "city"):
            value = payload.get(field)
            if not isinstance(value, str) or not value.strip():
                raise PropertyValidationError(f"'{field}' is required")

        if payload["type"] not in PROPERTY_TYPES:
            raise PropertyValidationError(
                f"'type' must be one of: {', '.join(PROPERTY_TYPES)}"
            )

        price = _parse_int(payload.get("price"))
        if price is None or price <= 0:
            raise PropertyValidationError("'price' must be a positive integer")

        area = payload.get("area")
        if area is None:
            area = {}
        elif not isinstance(area, dict):
            raise PropertyValidationError("'area' must be an object like {\"value\": 1200, \"unit\": \"sqft\"}")
        area_unit = area.get("unit") or payload.get("area_unit") or "sqft"
        if area_unit not in AREA_UNITS:
            raise PropertyValidationError(f"'area.unit' must be one of: {', '.join(AREA_UNITS)}")

        area_value = area.get("value", payload.get("area_value"))
        if area_value is not None and area_value != "":
            area_value = _parse_number(area_value)
            if area_value is None or not math.isfinite(area_value) or area_value <= 0:
                raise PropertyValidationError("'area.value' must be a positive number")
        else:
            area_value = None

        amenities = payload.get("amenities")
        if amenities is None:
            amenities = []
        elif isinstance(amenities, str):
            amenities = [amenities] if amenities.strip() else []
        elif not isinstance(amenities, (list, tuple)):
            raise PropertyValidationError("'amenities' must be a list of strings")

        for_sale = payload.get("forSale", payload.get("for_sale", True))
        is_available = payload.get("isAvailable", payload.get("is_available", True))
        owner_contact = payload.get("ownerContact", payload.get("owner_contact"))

        return {
            "title": payload["title"].strip(),
            "type": payload["type"],
            "location": payload["location"].strip(),
            "city": payload["city"].strip(),
            "state": payload.get("state") or "Goa",
            "bedrooms": _parse_int(payload.get("bedrooms")),
            "bathrooms": _parse_int(payload.get("bathrooms")),
            "area_value": area_value,
            "area_unit": area_unit,
            "price": price,
            "for_sale": _parse_bool(for_sale, True),
            "amenities": [str(a) for a in amenities],
            "description": payload.get("description"),
            "owner_contact": json.dumps(owner_contact) if owner_contact else None,
            "is_available": _parse_bool(is_available, True),
        }
