# migrations/env.py
from __future__ import annotations

import logging
from logging.config import fileConfig

from alembic import context

from hrms_payroll.wsgi import app as flask_app
from hrms_payroll.extensions import db

config = context.config

if config.config_file_name is not None and config.file_config.has_section("loggers"):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

log = logging.getLogger("alembic.env")

with flask_app.app_context():
    engine = db.engine
    db_url = engine.url.render_as_string(hide_password=False)

config.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))
target_metadata = db.metadata

# SQLite cannot ALTER most constraints in place
render_as_batch = engine.dialect.name == "sqlite"


def _configure(**kw) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=render_as_batch,
        **kw,
    )


def run_migrations_offline() -> None:
    """Emit SQL for the payroll schema without a live connection."""
    _configure(url=config.get_main_option("sqlalchemy.url"), literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with flask_app.app_context():
        log.info("Migrating %s", engine.url.render_as_string(hide_password=True))
        with engine.connect() as connection:
            _configure(connection=connection)
            with context.begin_transaction():
                context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
