"""Shared fixtures for MonthMesh tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from monthmesh.core.config import MonthMeshConfig, ReadFailurePolicy, StorageConfig


class FixedClock:
    """Clock returning a settable day."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today


def make_config(
    partition_dir: Path,
    policy: ReadFailurePolicy = ReadFailurePolicy.PROPAGATE,
) -> MonthMeshConfig:
    return MonthMeshConfig(
        storage=StorageConfig(partition_dir=partition_dir),
        read_failure_policy=policy,
    )


@pytest.fixture
def partition_dir(tmp_path: Path) -> Path:
    return tmp_path / "repositories"


@pytest.fixture
def config(partition_dir: Path) -> MonthMeshConfig:
    return make_config(partition_dir)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(date(2024, 6, 1))
