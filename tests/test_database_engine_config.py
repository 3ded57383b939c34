def test_get_engine_kwargs_sqlite_has_check_same_thread(monkeypatch):
    # Import lazily so monkeypatch can affect env usage deterministically.
    from lifescore.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///./lifescore.db")
    assert "connect_args" in kwargs
    assert kwargs["connect_args"]["check_same_thread"] is False
    # SQLite should not require pool sizing knobs.
    assert "pool_size" not in kwargs
    assert "max_overflow" not in kwargs
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_kwargs_postgres_uses_pool_env(monkeypatch):
    from lifescore.database import database as db

    monkeypatch.setenv("DB_POOL_SIZE", "7")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "3")
    monkeypatch.setenv("DB_POOL_TIMEOUT_SEC", "15")

    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db")
    assert "connect_args" not in kwargs
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["pool_size"] == 7
    assert kwargs["max_overflow"] == 3
    assert kwargs["pool_timeout"] == 15


def test_debug_env_enables_echo(monkeypatch):
    from lifescore.database import database as db

    monkeypatch.setenv("DEBUG", "true")
    assert db.get_engine_kwargs("sqlite:///./lifescore.db")["echo"] is True
    monkeypatch.setenv("DEBUG", "false")
    assert db.get_engine_kwargs("sqlite:///./lifescore.db")["echo"] is False


def test_sqlite_url_detection():
    from lifescore.database import database as db

    assert db._is_sqlite_url("sqlite:///./lifescore.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False
    assert db._is_sqlite_url(None) is False


def test_init_db_creates_all_tables(tmp_path):
    from sqlalchemy import create_engine, inspect
    from lifescore.database import database as db

    engine = create_engine(f"sqlite:///{tmp_path / 'fresh.db'}")
    db.init_db(engine_override=engine)

    tables = set(inspect(engine).get_table_names())
    assert {
        "users",
        "pillars",
        "tasks",
        "task_completions",
        "daily_scores",
        "user_stats",
        "user_preferences",
        "outcomes",
        "outcome_logs",
        "goals",
        "goal_logs",
        "cycles",
        "cycle_goals",
        "weekly_targets",
    } <= tables
