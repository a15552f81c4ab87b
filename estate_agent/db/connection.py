"""Database connection management"""
import logging
from typing import Optional, Dict, Any
from psycopg2 import pool
from psycopg2.extensions import connection
from estate_agent.config import Config

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.ThreadedConnectionPool] = None
_last_db_config: Optional[Dict[str, Any]] = None


def get_db_connection() -> connection:
    """Borrow a connection from the pool, creating the pool on first use"""
    global _connection_pool, _last_db_config

    db_config = Config.get_db_config()

    # Rebuild the pool when settings changed since it was created
    if _connection_pool is not None and _last_db_config != db_config:
        close_all_connections()

    if _connection_pool is None:
        logger.debug(
            "DB connect: host=%s port=%s database=%s user=%s sslmode=%s",
            db_config['host'], db_config['port'], db_config['database'],
            db_config['user'], Config.DB_SSLMODE,
        )
        try:
            _connection_pool = pool.ThreadedConnectionPool(
                minconn=1,
                maxconn=20,
                host=db_config['host'],
                port=db_config['port'],
                database=db_config['database'],
                user=db_config['user'],
                password=db_config['password'],
                connect_timeout=30,
                sslmode=Config.DB_SSLMODE,
                options='-c statement_timeout=20000'
            )
        except Exception:
            logger.error(
                "Database connection failed: host=%s port=%s database=%s",
                db_config.get('host'), db_config.get('port'), db_config.get('database'),
                exc_info=True,
            )
            raise

        logger.info(
            "Database pool ready: %s:%s/%s",
            db_config['host'], db_config['port'], db_config['database'],
        )
        _last_db_config = db_config.copy()

    conn = _connection_pool.getconn()
    conn.set_client_encoding('UTF8')
    return conn


def return_db_connection(conn: connection):
    """Give a connection back to the pool"""
    if _connection_pool:
        _connection_pool.putconn(conn)


def close_all_connections():
    """Close every pooled connection"""
    global _connection_pool
    if _connection_pool:
        _connection_pool.closeall()
        _connection_pool = None


def is_database_connected() -> bool:
    """Liveness check used by the health endpoints"""
    try:
        conn = get_db_connection()
    except Exception:
        return False
    try:
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        return True
    except Exception:
        logger.warning("Database ping failed", exc_info=True)
        return False
    finally:
        return_db_connection(conn)
