"""
Catalog table management
- creates the properties / conversations tables when missing
"""
import logging
from estate_agent.db.connection import get_db_connection, return_db_connection

logger = logging.getLogger(__name__)

PROPERTY_TYPES = ("house", "flat", "plot", "shop", "office", "land", "villa")
AREA_UNITS = ("sqft", "sqm", "acres")
MESSAGE_ROLES = ("user", "agent", "system")

_SCHEMA_STATEMENTS = [
    f"""
    CREATE TABLE IF NOT EXISTS properties (
        id SERIAL PRIMARY KEY,
        title TEXT NOT NULL,
        type TEXT NOT NULL CHECK (type IN ({", ".join(f"'{t}'" for t in PROPERTY_TYPES)})),
        location TEXT NOT NULL,
        city TEXT NOT NULL,
        state TEXT NOT NULL DEFAULT 'Goa',
        bedrooms INTEGER,
        bathrooms INTEGER,
        area_value NUMERIC,
        area_unit TEXT NOT NULL DEFAULT 'sqft' CHECK (area_unit IN ({", ".join(f"'{u}'" for u in AREA_UNITS)})),
        price BIGINT NOT NULL CHECK (price > 0),
        for_sale BOOLEAN NOT NULL DEFAULT TRUE,
        amenities TEXT[] NOT NULL DEFAULT '{{}}',
        description TEXT,
        owner_contact JSONB,
        is_available BOOLEAN NOT NULL DEFAULT TRUE,
        date_added TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_properties_price ON properties (price)",
    "CREATE INDEX IF NOT EXISTS idx_properties_type ON properties (type)",
    """
    CREATE TABLE IF NOT EXISTS conversations (
        session_id TEXT PRIMARY KEY,
        client_id TEXT,
        is_active BOOLEAN NOT NULL DEFAULT TRUE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS conversation_messages (
        id BIGSERIAL PRIMARY KEY,
        session_id TEXT NOT NULL REFERENCES conversations (session_id) ON DELETE CASCADE,
        role TEXT NOT NULL CHECK (role IN ({", ".join(f"'{r}'" for r in MESSAGE_ROLES)})),
        content TEXT NOT NULL,
        timestamp TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_conversation_messages_session ON conversation_messages (session_id, id)",
]


def ensure_schema():
    """Create catalog and conversation tables if they do not exist yet"""
    conn = get_db_connection()
    try:
        with conn.cursor() as cursor:
            for statement in _SCHEMA_STATEMENTS:
                cursor.execute(statement)
        conn.commit()
        logger.info("Catalog schema verified")
    except Exception:
        conn.rollback()
        logger.error("Schema bootstrap failed", exc_info=True)
        raise
    finally:
        return_db_connection(conn)
