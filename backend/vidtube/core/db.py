import ssl
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vidtube.core.config import configs


def _ssl_for_mode(sslmode: str):
    if sslmode == "disable":
        return False
    if sslmode in ("verify-ca", "verify-full"):
        return ssl.create_default_context()
    # require / prefer: encrypted, certificate not checked
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def prepare_database_url(url: str) -> tuple[str, dict]:
    """
    Move a libpq style ``sslmode`` query param into asyncpg ``connect_args``.

    asyncpg rejects ``sslmode`` in the URL, managed Postgres URLs usually carry it.
    """
    if not url:
        return url, {}

    parts = urlsplit(url)
    params = parse_qsl(parts.query, keep_blank_values=True)
    sslmodes = [value for key, value in params if key == "sslmode"]
    if not sslmodes:
        return url, {}

    kept = [(key, value) for key, value in params if key != "sslmode"]
    cleaned = urlunsplit(parts._replace(query=urlencode(kept)))
    return cleaned, {"ssl": _ssl_for_mode(sslmodes[-1])}


database_url, connect_args = prepare_database_url(configs.DATABASE_URI)

engine = create_async_engine(
    database_url,
    pool_pre_ping=True,
    connect_args=connect_args,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
