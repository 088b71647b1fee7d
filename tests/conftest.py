"""Pytest configuration and fixtures for loadstats tests."""

from __future__ import annotations

import json
import random
from pathlib import Path

import pytest

from loadstats.aggregation import RequestRecord
from loadstats.stats import FrequencyTable


@pytest.fixture()
def odd_table() -> FrequencyTable:
    """Two requests at 5ms, two at 3ms and one at 6ms."""
    return FrequencyTable({5: 2, 3: 2, 6: 1})


@pytest.fixture()
def even_table() -> FrequencyTable:
    """One request each at 1, 2, 3 and 4 ms."""
    return FrequencyTable({1: 1, 2: 1, 3: 1, 4: 1})


@pytest.fixture()
def random_tables() -> list[FrequencyTable]:
    """Reproducible assortment of non-empty tables of various shapes."""
    rng = random.Random(1234)
    tables = [FrequencyTable({7: 1}), FrequencyTable({0: 3}), FrequencyTable({1: 1, 1000: 1})]
    for _ in range(40):
        size = rng.randint(1, 25)
        tables.append(
            FrequencyTable({rng.randint(0, 500): rng.randint(1, 40) for _ in range(size)})
        )
    return tables


@pytest.fixture()
def sample_records() -> list[RequestRecord]:
    """A small load run over two request names."""
    return [
        RequestRecord(name="login", start=0, end=120, result=True),
        RequestRecord(name="login", start=10, end=130, result=True),
        RequestRecord(name="login", start=20, end=360, result=False),
        RequestRecord(name="search", start=5, end=50, result=True),
        RequestRecord(name="search", start=6, end=81, result=True),
        RequestRecord(name="search", start=7, end=52, result=True),
        RequestRecord(name="search", start=8, end=1008, result=False),
    ]


@pytest.fixture()
def records_file(tmp_path: Path, sample_records: list[RequestRecord]) -> Path:
    """JSONL file holding ``sample_records``."""
    path = tmp_path / "records.jsonl"
    path.write_text(
        "\n".join(json.dumps(record.to_dict()) for record in sample_records) + "\n",
        encoding="utf-8",
    )
    return path
