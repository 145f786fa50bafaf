"""
Integration Tests: User Repository

Tests:
    - Create and read back a user
    - Hot listing across partitions, window edges and the empty case
    - Concurrent writes into a new month
    - Startup scan of existing partition files
    - Both read failure policies
    - Insert failures
"""

import asyncio
from datetime import date

from monthmesh.core.config import ReadFailurePolicy
from monthmesh.core.errors import ErrorCode, InsertError, QueryError
from monthmesh.partition.keys import PartitionId, key_of
from monthmesh.storage.repositories import UserRepository
from monthmesh.storage.schema import User, select_all_sql

from monthmesh.tests.conftest import make_config

ALICE = User(id=1, name="Alice", registered_date=date(2024, 1, 10))
BOB = User(id=2, name="Bob", registered_date=date(2022, 1, 10))


async def _open(config, clock) -> UserRepository:
    result = await UserRepository.open(config, clock)
    assert result.is_ok(), result
    return result.unwrap()


class TestCreateUser:
    """Tests for the write path."""

    def test_round_trip(self, config, clock):
        async def scenario():
            async with await _open(config, clock) as repository:
                created = await repository.create_user(ALICE)
                assert created.unwrap() == ALICE

                rows = (await repository.engine.fetch_all(
                    select_all_sql(PartitionId("202401"))
                )).unwrap()
                assert [User.from_row(r) for r in rows] == [ALICE]

        asyncio.run(scenario())

    def test_creates_partition_file_lazily(self, config, clock, partition_dir):
        async def scenario():
            async with await _open(config, clock) as repository:
                assert len(repository.catalog) == 0
                await repository.create_user(BOB)
                assert key_of(BOB.registered_date) in repository.catalog

        asyncio.run(scenario())
        assert (partition_dir / "202201.db").is_file()

    def test_concurrent_same_month(self, config, clock):
        count = 25

        async def scenario():
            async with await _open(config, clock) as repository:
                users = [
                    User(id=i, name=f"user-{i}", registered_date=date(2024, 2, 1 + i % 28))
                    for i in range(count)
                ]
                results = await asyncio.gather(*(repository.create_user(u) for u in users))

                assert all(r.is_ok() for r in results)
                assert len(repository.catalog) == 1
                rows = (await repository.engine.fetch_all(
                    "SELECT count(*) FROM \"202402\".users"
                )).unwrap()
                assert rows == [(count,)]

        asyncio.run(scenario())

    def test_empty_name_rejected(self, config, clock, partition_dir):
        async def scenario():
            async with await _open(config, clock) as repository:
                result = await repository.create_user(
                    User(id=3, name="", registered_date=date(2024, 1, 1))
                )
                assert isinstance(result.error, InsertError)
                assert len(repository.catalog) == 0

        asyncio.run(scenario())
        assert not (partition_dir / "202401.db").exists()

    def test_unencodable_name_rejected(self, config, clock, partition_dir):
        async def scenario():
            async with await _open(config, clock) as repository:
                result = await repository.create_user(
                    User(id=4, name="\ud800", registered_date=date(2024, 1, 1))
                )
                assert result.is_err()
                assert result.error.code is ErrorCode.INSERT_VALIDATION_FAILED
                assert result.error.context["field"] == "name"
                assert len(repository.catalog) == 0

        asyncio.run(scenario())
        assert not (partition_dir / "202401.db").exists()

    def test_write_failure(self, config, clock):
        async def scenario():
            repository = await _open(config, clock)
            assert (await repository.create_user(ALICE)).is_ok()
            await repository.close()

            result = await repository.create_user(
                User(id=9, name="Late", registered_date=date(2024, 1, 20))
            )
            assert result.is_err()
            assert isinstance(result.error, InsertError)
            assert result.error.code is ErrorCode.INSERT_WRITE_FAILED
            assert result.error.context["partition"] == "202401"

        asyncio.run(scenario())


class TestListHotUsers:
    """Tests for the read path."""

    def test_reference_scenario(self, config, clock):
        async def scenario():
            async with await _open(config, clock) as repository:
                assert (await repository.create_user(ALICE)).is_ok()
                assert (await repository.create_user(BOB)).is_ok()

                users = (await repository.list_hot_users()).unwrap()
                assert users == [ALICE]

        asyncio.run(scenario())

    def test_empty_without_partitions(self, config, clock):
        async def scenario():
            async with await _open(config, clock) as repository:
                submitted = repository.engine.stats.submitted
                result = await repository.list_hot_users()

                assert result.is_ok()
                assert result.unwrap() == []
                assert repository.engine.stats.submitted == submitted

        asyncio.run(scenario())

    def test_only_cold_partitions(self, config, clock):
        async def scenario():
            async with await _open(config, clock) as repository:
                await repository.create_user(BOB)
                assert (await repository.list_hot_users()).unwrap() == []

        asyncio.run(scenario())

    def test_ordered_by_partition(self, config, clock):
        users = [
            User(id=10, name="June", registered_date=date(2024, 6, 30)),
            User(id=11, name="EarlyEdge", registered_date=date(2023, 6, 1)),
            User(id=12, name="March", registered_date=date(2024, 3, 3)),
            User(id=13, name="TooOld", registered_date=date(2023, 5, 31)),
            User(id=14, name="Future", registered_date=date(2024, 7, 1)),
        ]

        async def scenario():
            async with await _open(config, clock) as repository:
                for user in users:
                    assert (await repository.create_user(user)).is_ok()

                listed = (await repository.list_hot_users()).unwrap()
                assert [u.name for u in listed] == ["EarlyEdge", "March", "June"]

        asyncio.run(scenario())

    def test_window_follows_clock(self, config, clock):
        async def scenario():
            async with await _open(config, clock) as repository:
                await repository.create_user(ALICE)
                assert (await repository.list_hot_users()).unwrap() == [ALICE]

                clock.today = date(2025, 2, 1)
                assert (await repository.list_hot_users()).unwrap() == []

        asyncio.run(scenario())


class TestStartupScan:
    """Tests for reopening an existing partition directory."""

    def test_reopen_sees_existing_data(self, config, clock, partition_dir):
        async def first_run():
            async with await _open(config, clock) as repository:
                await repository.create_user(ALICE)
                await repository.create_user(BOB)

        async def second_run():
            async with await _open(config, clock) as repository:
                assert [str(k) for k in repository.catalog] == ["2022-01", "2024-01"]
                assert (await repository.list_hot_users()).unwrap() == [ALICE]

        asyncio.run(first_run())
        (partition_dir / "README.txt").write_text("not a partition")
        (partition_dir / "202413.db").write_bytes(b"")
        asyncio.run(second_run())


class TestReadFailurePolicy:
    """Tests for PROPAGATE and DEGRADE_TO_EMPTY."""

    @staticmethod
    async def _break_catalog(repository: UserRepository) -> None:
        # Recorded but never attached, so the merged query references a missing database
        async with repository.catalog.lock:
            repository.catalog.record(key_of(date(2024, 2, 1)))

    def test_propagate(self, partition_dir, clock):
        config = make_config(partition_dir, ReadFailurePolicy.PROPAGATE)

        async def scenario():
            async with await _open(config, clock) as repository:
                await repository.create_user(ALICE)
                await self._break_catalog(repository)

                result = await repository.list_hot_users()
                assert result.is_err()
                assert isinstance(result.error, QueryError)
                assert result.error.context["partitions"] == ["202401", "202402"]

        asyncio.run(scenario())

    def test_degrade_to_empty(self, partition_dir, clock):
        config = make_config(partition_dir, ReadFailurePolicy.DEGRADE_TO_EMPTY)

        async def scenario():
            async with await _open(config, clock) as repository:
                await repository.create_user(ALICE)
                await self._break_catalog(repository)

                result = await repository.list_hot_users()
                assert result.is_ok()
                assert result.unwrap() == []

        asyncio.run(scenario())
