"""pgcache_geohash: geohash aggregations for a PostGIS feature cache."""

from setuptools import find_namespace_packages, setup

with open("README.md") as f:
    desc = f.read()

install_requires = [
    "attrs>=23.2.0",
    "pydantic>=2.4.1,<3.0.0",
    "pydantic-settings>=2.0.0",
    "orjson>=3.9.0",
    "pygeofilter~=0.3.1",
    "psycopg[binary]>=3.2.0",
    "psycopg-pool>=3.2.0",
    "pygeohash>=1.2.0",
    "shapely>=2.0.0",
    "click>=8.0.0",
]

extra_reqs = {
    "dev": [
        "pytest>=7.0.0",
        "pytest-cov>=4.0.0",
        "pytest-asyncio>=0.21.0",
    ],
}

setup(
    name="pgcache_geohash",
    version="0.1.0",
    description="Adaptive precision geohash aggregations over a PostGIS feature cache.",
    long_description=desc,
    long_description_content_type="text/markdown",
    python_requires=">=3.9",
    classifiers=[
        "Intended Audience :: Developers",
        "Intended Audience :: Information Technology",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "License :: OSI Approved :: MIT License",
    ],
    license="MIT",
    packages=find_namespace_packages(include=["pgcache_geohash", "pgcache_geohash.*"]),
    zip_safe=False,
    install_requires=install_requires,
    tests_require=extra_reqs["dev"],
    extras_require=extra_reqs,
    entry_points={
        "console_scripts": ["pgcache-geohash=pgcache_geohash.cli:cli"]
    },
)
