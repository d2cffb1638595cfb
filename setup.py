"""
pgcell - Setup

Pure-Python package; no native extensions.
"""

from setuptools import setup, find_packages
from pathlib import Path


setup(
    name="pgcell",
    version="0.1.0",
    description="Safe display decoding for PostgreSQL cell values (text and binary wire formats)",
    long_description=open("README.md").read() if Path("README.md").exists() else "",
    long_description_content_type="text/markdown",
    author="pgcell Contributors",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
        ],
        "pg": [
            "psycopg[binary]>=3.0",
        ],
        "all": [
            "psycopg[binary]>=3.0",
            "pytest>=7.0",
            "pytest-cov>=4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pgcell-decode=pgcell.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
    ],
)
