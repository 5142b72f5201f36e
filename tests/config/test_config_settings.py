import pytest
from pydantic import ValidationError

from pgcache_geohash.config import PgCacheSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "PGHOST",
        "PGPORT",
        "PGDATABASE",
        "PGUSER",
        "PGPASSWORD",
        "PG_TIMEOUT",
        "PG_USE_SSL",
        "GEOHASH_DEFAULT_PRECISION",
        "GEOHASH_SRID",
        "GEOHASH_CLAMP_TO_FLOOR",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = PgCacheSettings()
    assert settings.pghost == "localhost"
    assert settings.pgport == 5432
    assert settings.geohash_default_precision == 8
    assert settings.geohash_srid == 4326
    assert settings.clamp_to_floor is False
    assert settings.pg_use_ssl is False


def test_connection_settings_from_env(monkeypatch):
    monkeypatch.setenv("PGHOST", "db.example.com")
    monkeypatch.setenv("PGPORT", "6543")
    monkeypatch.setenv("PGDATABASE", "koop")
    monkeypatch.setenv("PGUSER", "reader")
    monkeypatch.setenv("PG_USE_SSL", "true")

    conninfo = PgCacheSettings().conninfo

    assert "host=db.example.com" in conninfo
    assert "port=6543" in conninfo
    assert "dbname=koop" in conninfo
    assert "user=reader" in conninfo
    assert "sslmode=require" in conninfo
    assert "password" not in conninfo


def test_geohash_settings_from_env(monkeypatch):
    monkeypatch.setenv("GEOHASH_DEFAULT_PRECISION", "6")
    monkeypatch.setenv("GEOHASH_SRID", "3857")
    settings = PgCacheSettings()
    assert settings.geohash_default_precision == 6
    assert settings.geohash_srid == 3857


@pytest.mark.parametrize(
    "value, expected",
    (("true", True), ("1", True), ("yes", True), ("false", False), ("0", False), ("no", False)),
)
def test_clamp_to_floor(monkeypatch, value, expected):
    monkeypatch.setenv("GEOHASH_CLAMP_TO_FLOOR", value)
    assert PgCacheSettings().clamp_to_floor is expected


def test_invalid_boolean_is_rejected(monkeypatch):
    monkeypatch.setenv("GEOHASH_CLAMP_TO_FLOOR", "maybe")
    with pytest.raises(ValidationError):
        PgCacheSettings()


def test_boolean_settings_from_constructor():
    settings = PgCacheSettings(clamp_to_floor=True, pg_use_ssl=True)
    assert settings.clamp_to_floor is True
    assert "sslmode=require" in settings.conninfo


def test_boolean_settings_from_env_file(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("GEOHASH_CLAMP_TO_FLOOR=true\nPG_USE_SSL=true\n")
    monkeypatch.chdir(tmp_path)

    settings = PgCacheSettings()

    assert settings.clamp_to_floor is True
    assert settings.pg_use_ssl is True
