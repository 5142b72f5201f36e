"""pgcache-geohash CLI - geohash utilities for the PostGIS feature cache.

Usage:
    pgcache-geohash aggregate my_table --limit 100 --precision 8
    pgcache-geohash aggregate my_table --where "type = 'park'" --geometry "-10,-10,10,10"
    pgcache-geohash encode features.geojson --precision 8
"""

import asyncio
import logging
import sys

import click
import orjson

from pgcache_geohash.aggregation import GeohashAggregationClient
from pgcache_geohash.config import PgCacheSettings
from pgcache_geohash.database_logic import DatabaseLogic
from pgcache_geohash.geohasher import create
from pgcache_geohash.models import AggregationOptions
from pgcache_geohash.version import __version__

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def run_aggregate(table, limit, precision, options):
    """Open a pool, run one aggregation and close the pool.

    Args:
        table: Table to aggregate
        limit: Maximum number of buckets
        precision: Requested precision, or None for the configured default
        options: AggregationOptions with the where and geometry filters

    Returns:
        The aggregation result
    """
    settings = PgCacheSettings()
    database = DatabaseLogic(settings=settings)
    client = GeohashAggregationClient(database=database, settings=settings)

    logger.info(f"Connecting to {settings.pghost}:{settings.pgport}/{settings.pgdatabase}")
    await database.open()
    try:
        return await client.aggregate(table, limit, precision, options)
    finally:
        await database.close()


@click.group()
@click.version_option(version=__version__, prog_name="pgcache-geohash")
def cli():
    """pgcache-geohash - geohash aggregation tools for the PostGIS feature cache."""
    pass


@cli.command("aggregate")
@click.argument("table")
@click.option("--limit", type=int, default=1000, show_default=True, help="Maximum number of buckets")
@click.option("--precision", type=int, default=None, help="Requested geohash precision (default: GEOHASH_DEFAULT_PRECISION)")
@click.option("--where", type=str, default=None, help="Attribute filter expression")
@click.option("--geometry", type=str, default=None, help="Spatial filter: bbox, Esri envelope or GeoJSON")
@click.option(
    "--filter-lang",
    type=click.Choice(["ecql", "cql2-text", "cql2-json"]),
    default="ecql",
    show_default=True,
    help="Language of the --where expression",
)
def aggregate(table, limit, precision, where, geometry, filter_lang):
    """Print geohash bucket counts for TABLE as JSON.

    Connection settings come from PGHOST, PGPORT, PGDATABASE, PGUSER and
    PGPASSWORD.
    """
    options = AggregationOptions(where=where, geometry=geometry, filter_lang=filter_lang)
    try:
        result = asyncio.run(run_aggregate(table, limit, precision, options))
    except KeyboardInterrupt:
        click.echo(click.style("Aggregation interrupted by user", fg="yellow"), err=True)
        sys.exit(1)
    except Exception as e:
        error_msg = str(e)
        click.echo(click.style(f"Aggregation failed: {error_msg}", fg="red"), err=True)
        if "Connection refused" in error_msg:
            click.echo(
                click.style(
                    "Hint: Make sure PostgreSQL is running and reachable at PGHOST:PGPORT",
                    fg="yellow",
                ),
                err=True,
            )
        sys.exit(1)

    if isinstance(result, dict):
        payload = result
    else:
        payload = {"rows": result.rows}
    click.echo(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS).decode())


@cli.command("encode")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--precision", type=int, default=8, show_default=True, help="Geohash precision")
@click.option("--property", "property_name", default="geohash", show_default=True, help="Property to store the geohash in")
def encode(path, precision, property_name):
    """Add a geohash property to every feature of a GeoJSON file.

    Features without a geometry get a null geohash. The updated feature
    collection is printed to stdout.
    """
    with open(path, "rb") as f:
        data = orjson.loads(f.read())

    features = data.get("features", []) if data.get("type") == "FeatureCollection" else [data]
    missing = 0
    for feature in features:
        geohash = create(feature, precision)
        if geohash is None:
            missing += 1
        feature.setdefault("properties", {})
        if feature["properties"] is None:
            feature["properties"] = {}
        feature["properties"][property_name] = geohash

    if missing:
        logger.warning(f"{missing} features have no geometry")
    click.echo(orjson.dumps(data).decode())


if __name__ == "__main__":
    cli()
