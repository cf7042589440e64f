from logging.config import fileConfig
from alembic import context
import os
import sys

# --- корень репозитория в sys.path, чтобы работал `from app import create_app`
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(THIS_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# --- metadata берём из Flask-приложения (models регистрируются через blueprints)
from app import create_app            # noqa: E402
from extensions import db             # noqa: E402
import models                         # noqa: E402,F401

app = create_app(os.getenv("FLASK_CONFIG", "prod"))
app.app_context().push()

engine_url = str(db.engine.url)
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", engine_url)

target_metadata = db.metadata

def run_migrations_offline():
    """Только SQL, без подключения."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url") or engine_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,  # для SQLite
    )
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    with db.engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,  # для SQLite
        )
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
