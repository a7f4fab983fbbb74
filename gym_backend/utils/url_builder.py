"""
Database URL utilities
"""
import logging
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

logger = logging.getLogger(__name__)


def build_async_url(sync_url: str) -> str:
    """
    Convert a sync database URL into its async driver form

    postgres:// and postgresql:// become postgresql+asyncpg:// (sslmode is
    removed, asyncpg doesn't accept it in the URL); sqlite:// becomes
    sqlite+aiosqlite://.

    Args:
        sync_url: Original database URL

    Returns:
        Async-compatible database URL
    """
    if not sync_url:
        return sync_url

    parts = urlsplit(sync_url)
    scheme = parts.scheme

    if "+" in scheme:
        base_scheme = scheme.split("+")[0]
    else:
        base_scheme = scheme

    if base_scheme.startswith("postgres"):
        query_pairs = dict(parse_qsl(parts.query, keep_blank_values=True))
        query_pairs.pop("sslmode", None)
        new_query = urlencode(query_pairs) if query_pairs else ""

        new_parts = ("postgresql+asyncpg", parts.netloc, parts.path, new_query, parts.fragment)
        return urlunsplit(new_parts)

    if base_scheme == "sqlite":
        # urlsplit drops the empty netloc of sqlite:///file.db, rebuild by hand
        return "sqlite+aiosqlite" + sync_url[len(scheme):]

    return sync_url


def is_sqlite_url(database_url: str) -> bool:
    return bool(database_url) and database_url.split(":", 1)[0].split("+")[0] == "sqlite"


def normalize_database_url(database_url: str) -> str:
    """
    Normalize database URL for connection pooling

    Args:
        database_url: Original database URL

    Returns:
        Normalized database URL
    """
    if not database_url:
        return database_url

    # Transaction Pooler (6543) doesn't support prepared statements
    if ":6543" in database_url:
        database_url = database_url.replace(":6543", ":5432")
        logger.info("Switched from Transaction Pooler (6543) to Session Pooler (5432)")
    elif ".pooler.supabase.com" in database_url and ":5432" not in database_url:
        database_url = database_url.replace(".pooler.supabase.com", ".pooler.supabase.com:5432")
        logger.info("Added Session Pooler port (5432)")

    return database_url
