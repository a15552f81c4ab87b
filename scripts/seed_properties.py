"""
Seed the catalog with sample Goa listings

Usage:
    python scripts/seed_properties.py            # only when the catalog is empty
    python scripts/seed_properties.py --reset    # wipe properties first

Database settings come from .env / environment (DATABASE_URL or DB_*).
"""
import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv  # noqa: E402

load_dotenv()

from estate_agent.db.connection import close_all_connections  # noqa: E402
from estate_agent.db.schema import ensure_schema  # noqa: E402
from estate_agent.services.data.executor import execute_write  # noqa: E402
from estate_agent.services.data.property_store import PropertyStore  # noqa: E402
from estate_agent.services.data.samples import SAMPLE_PROPERTIES  # noqa: E402

logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed sample properties")
    parser.add_argument('--reset', action='store_true', help='delete existing properties first')
    args = parser.parse_args()

    try:
        ensure_schema()
        if args.reset:
            execute_write("DELETE FROM properties")
            logger.info("Existing properties cleared")

        inserted = PropertyStore().seed_if_empty(SAMPLE_PROPERTIES)
        if inserted:
            logger.info("Added %d sample properties", inserted)
        else:
            logger.info("Catalog already has data, nothing seeded")
        return 0
    except Exception as e:
        logger.error("Seeding failed: %s", e)
        return 1
    finally:
        close_all_connections()


if __name__ == '__main__':
    sys.exit(main())
