"""
Tests for Config.from_env().

Run with: pytest src/softrepo/config_test.py -v
"""
from softrepo.config import Config


def test_defaults(monkeypatch):
    for name in ["DATABASE_URL", "LOG_LEVEL", "SOFT_DELETE_FIELD"]:
        monkeypatch.delenv(name, raising=False)

    cfg = Config.from_env()

    assert cfg.database_url == "postgresql://localhost:5432/softrepo"
    assert cfg.log_level == "INFO"
    assert cfg.soft_delete_field == "deleted_at"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://db.internal:5432/app")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("SOFT_DELETE_FIELD", "removed_at")

    cfg = Config.from_env()

    assert cfg.database_url == "postgresql://db.internal:5432/app"
    assert cfg.log_level == "DEBUG"
    assert cfg.soft_delete_field == "removed_at"
