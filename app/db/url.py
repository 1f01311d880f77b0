from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

ASYNC_POSTGRES_SCHEME = "postgresql+psycopg"
_POSTGRES_ALIASES = {"postgres", "postgresql", "postgresql+asyncpg", "postgresql+psycopg2"}
_SSL_OFF = {"0", "false", "no", "off", "disable"}
_SSL_MODES = {"require", "verify-ca", "verify-full"}


def _sslmode_from_flag(value: str) -> str:
    normalized = value.lower().strip()
    if normalized in _SSL_OFF:
        return "disable"
    if normalized in _SSL_MODES:
        return normalized
    return "require"


def normalize_database_url(url: str) -> str:
    """Point Postgres URLs at the async psycopg driver and translate ``ssl=`` flags.

    Non-Postgres URLs (e.g. ``sqlite+aiosqlite``) are returned unchanged.
    """
    url = (url or "").strip()
    if not url:
        return url

    parts = urlsplit(url)
    if parts.scheme not in _POSTGRES_ALIASES and parts.scheme != ASYNC_POSTGRES_SCHEME:
        return url

    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    ssl_key = next((key for key in query if key.lower() == "ssl"), None)
    if ssl_key is not None:
        ssl_val = query.pop(ssl_key)
        query.setdefault("sslmode", _sslmode_from_flag(ssl_val))

    return urlunsplit(
        (ASYNC_POSTGRES_SCHEME, parts.netloc, parts.path, urlencode(query, doseq=True), parts.fragment)
    )
