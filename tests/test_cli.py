import orjson
import pytest
from click.testing import CliRunner

from pgcache_geohash import cli as cli_module
from pgcache_geohash.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def test_encode_adds_geohash(runner, tmp_path, point_feature, polygon_feature):
    path = tmp_path / "features.geojson"
    missing = {"type": "Feature", "properties": None, "geometry": None}
    collection = {
        "type": "FeatureCollection",
        "features": [point_feature, polygon_feature, missing],
    }
    path.write_bytes(orjson.dumps(collection))

    result = runner.invoke(cli, ["encode", str(path), "--precision", "6"])

    assert result.exit_code == 0, result.output
    features = orjson.loads(result.output)["features"]
    assert len(features[0]["properties"]["geohash"]) == 6
    assert len(features[1]["properties"]["geohash"]) == 6
    assert features[2]["properties"]["geohash"] is None


def test_encode_single_feature(runner, tmp_path, point_feature):
    path = tmp_path / "feature.json"
    path.write_bytes(orjson.dumps(point_feature))

    result = runner.invoke(cli, ["encode", str(path), "--property", "gh"])

    assert result.exit_code == 0, result.output
    assert len(orjson.loads(result.output)["properties"]["gh"]) == 8


def test_aggregate_prints_buckets(runner, monkeypatch, database):
    monkeypatch.setattr(cli_module, "DatabaseLogic", lambda settings: database)

    result = runner.invoke(
        cli, ["aggregate", "features", "--limit", "10", "--precision", "6"]
    )

    assert result.exit_code == 0, result.output
    assert orjson.loads(result.output) == {"9q8": 1000}
    assert database.opened and database.closed


def test_aggregate_failure_exits_non_zero(runner, monkeypatch, fake_database):
    database = fake_database([], error=RuntimeError("Connection refused"))
    monkeypatch.setattr(cli_module, "DatabaseLogic", lambda settings: database)

    result = runner.invoke(cli, ["aggregate", "features", "--precision", "6"])

    assert result.exit_code == 1
    assert database.closed
