"""Database module"""
from flask import Flask


def init_db(app: Flask):
    """Database bootstrap"""
    # The pool is created lazily on the first get_db_connection() call
    if app.config.get('INIT_SCHEMA'):
        from estate_agent.db.schema import ensure_schema
        ensure_schema()

    if app.config.get('SEED_SAMPLE_DATA'):
        from estate_agent.services.data.property_store import PropertyStore
        from estate_agent.services.data.samples import SAMPLE_PROPERTIES
        PropertyStore().seed_if_empty(SAMPLE_PROPERTIES)

    @app.teardown_appcontext
    def close_db(error):
        """Connections go back to the pool after each query, nothing to release here"""
        pass
