from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool
from sqlalchemy.engine import make_url

from vidtube.core.config import configs
from vidtube.models.orm import Base, Subscription, User, Video, View  # noqa: F401 - registers tables

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def sync_database_url() -> str:
    """The app URL with its async driver swapped for psycopg2."""
    parsed = make_url(configs.DATABASE_URI)
    if parsed.get_backend_name() == "postgresql":
        parsed = parsed.set(drivername="postgresql+psycopg2")
    return parsed.render_as_string(hide_password=False)


options = {"target_metadata": Base.metadata, "compare_type": True}

if context.is_offline_mode():
    context.configure(url=sync_database_url(), literal_binds=True, **options)
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(sync_database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, **options)
        with context.begin_transaction():
            context.run_migrations()
