from threading import Lock
from weakref import WeakSet

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


Base = declarative_base()

_schema_lock = Lock()
_schema_checked_engines: WeakSet = WeakSet()


def build_engine(database_url: str) -> Engine:
    if not database_url.startswith('sqlite'):
        return create_engine(database_url)

    options = {'connect_args': {'check_same_thread': False}}
    if ':memory:' in database_url or database_url in {'sqlite://', 'sqlite+pysqlite://'}:
        # One shared connection, otherwise every thread sees its own empty database.
        options['poolclass'] = StaticPool
    return create_engine(database_url, **options)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )


def ensure_ledger_schema(engine: Engine) -> None:
    """Bring tables created by older releases up to date and add lookup indexes."""
    if engine in _schema_checked_engines:
        return

    with _schema_lock:
        if engine in _schema_checked_engines:
            return

        inspector = inspect(engine)
        table_names = set(inspector.get_table_names())

        migration_steps = {
            'bookings': [
                ('member_name', 'ALTER TABLE bookings ADD COLUMN member_name VARCHAR'),
            ],
            'activities': [
                ('member_id', 'ALTER TABLE activities ADD COLUMN member_id VARCHAR'),
                ('device_info', 'ALTER TABLE activities ADD COLUMN device_info VARCHAR'),
            ],
        }

        existing_columns = {
            table_name: {column['name'] for column in inspector.get_columns(table_name)}
            for table_name in migration_steps
            if table_name in table_names
        }

        with engine.begin() as connection:
            for table_name, columns in existing_columns.items():
                for column_name, statement in migration_steps[table_name]:
                    if column_name not in columns:
                        connection.execute(text(statement))

            if 'bookings' in table_names:
                connection.execute(
                    text('CREATE INDEX IF NOT EXISTS idx_bookings_date ON bookings(date)')
                )
            if 'activities' in table_names:
                connection.execute(
                    text('CREATE INDEX IF NOT EXISTS idx_activities_date_created ON activities(date, created_at)')
                )
            if 'comments' in table_names:
                connection.execute(
                    text('CREATE INDEX IF NOT EXISTS idx_comments_date_created ON comments(date, created_at)')
                )

        _schema_checked_engines.add(engine)
