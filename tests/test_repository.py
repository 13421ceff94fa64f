"""
Tests for mapping repositories.

Tests using the `repository` fixture run against both the SQLAlchemy and the
in-memory backend.
"""
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from shortlink_app.repository.factory import RepositoryFactory, RepositoryBackend
from shortlink_app.repository.strategies import (
    InMemoryMappingRepository,
    SQLAlchemyMappingRepository
)
from shortlink_app.services.exceptions import StoreUnavailable, UniqueViolation


class TestInsert:
    """Test inserting mappings"""

    def test_insert_assigns_id_and_defaults(self, repository):
        mapping = repository.insert("https://example.com", "abcd1234")

        assert mapping.id == 1
        assert mapping.short_code == "abcd1234"
        assert mapping.long_url == "https://example.com"
        assert mapping.click_count == 0
        assert mapping.owner_id is None
        assert mapping.created_at is not None

    def test_ids_increase(self, repository):
        first = repository.insert("https://example.com/1", "code0001")
        second = repository.insert("https://example.com/2", "code0002")

        assert second.id > first.id

    def test_duplicate_code_raises_unique_violation(self, repository):
        """Test that the store itself rejects a taken short code"""
        repository.insert("https://example.com/1", "dupe0001")

        with pytest.raises(UniqueViolation) as exc_info:
            repository.insert("https://example.com/2", "dupe0001")

        assert exc_info.value.short_code == "dupe0001"
        # Failed insert leaves nothing behind and the store stays usable
        assert len(repository.list_all()) == 1
        assert repository.find_by_code("dupe0001").long_url == "https://example.com/1"
        assert repository.insert("https://example.com/3", "fresh001").short_code == "fresh001"


class TestLookups:
    """Test lookup and listing"""

    def test_find_by_code(self, repository):
        repository.insert("https://example.com", "find0001")

        assert repository.find_by_code("find0001").long_url == "https://example.com"
        assert repository.find_by_code("missing1") is None

    def test_find_by_code_is_case_sensitive(self, repository):
        repository.insert("https://example.com", "CaseCode")

        assert repository.find_by_code("casecode") is None

    def test_find_by_long_url_returns_earliest(self, repository):
        first = repository.insert("https://example.com", "long0001")
        repository.insert("https://example.com", "long0002")

        assert repository.find_by_long_url("https://example.com").id == first.id
        assert repository.find_by_long_url("https://other.example.com") is None

    def test_find_by_id(self, repository):
        mapping = repository.insert("https://example.com", "byid0001")

        assert repository.find_by_id(mapping.id).short_code == "byid0001"
        assert repository.find_by_id(9999) is None

    def test_list_all_in_insert_order(self, repository):
        repository.insert("https://example.com/1", "list0001")
        repository.insert("https://example.com/2", "list0002")
        repository.insert("https://example.com/3", "list0003")

        codes = [m.short_code for m in repository.list_all()]

        assert codes == ["list0001", "list0002", "list0003"]

    def test_list_all_empty(self, repository):
        assert repository.list_all() == []

    def test_list_by_owner(self, repository):
        repository.insert("https://example.com/1", "owna0001", owner_id="owner-a")
        repository.insert("https://example.com/2", "ownb0001", owner_id="owner-b")
        repository.insert("https://example.com/3", "owna0002", owner_id="owner-a")
        repository.insert("https://example.com/4", "anon0001")

        codes = [m.short_code for m in repository.list_by_owner("owner-a")]

        assert codes == ["owna0001", "owna0002"]
        assert repository.list_by_owner("owner-c") == []


class TestClicks:
    """Test the atomic click counter"""

    def test_increment_clicks(self, repository):
        repository.insert("https://example.com", "click001")

        assert repository.increment_clicks("click001").click_count == 1
        assert repository.increment_clicks("click001").click_count == 2
        assert repository.find_by_code("click001").click_count == 2

    def test_increment_missing_code(self, repository):
        assert repository.increment_clicks("missing1") is None
        assert repository.list_all() == []


class TestStoreErrors:
    """Test translation of driver errors"""

    def test_operational_error_becomes_store_unavailable(self, db_session):
        repository = SQLAlchemyMappingRepository(db_session)
        db_session.query = Mock(
            side_effect=OperationalError("SELECT", {}, Exception("database is locked"))
        )

        with pytest.raises(StoreUnavailable) as exc_info:
            repository.find_by_code("abcd1234")

        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_failed_commit_becomes_store_unavailable(self, db_session):
        repository = SQLAlchemyMappingRepository(db_session)
        db_session.commit = Mock(
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error"))
        )

        with pytest.raises(StoreUnavailable):
            repository.insert("https://example.com", "abcd1234")

    def test_failed_refresh_leaves_no_row(self, db_session):
        repository = SQLAlchemyMappingRepository(db_session)
        db_session.refresh = Mock(
            side_effect=OperationalError("SELECT", {}, Exception("connection reset"))
        )

        with pytest.raises(StoreUnavailable):
            repository.insert("https://example.com", "abcd1234")

        assert repository.list_all() == []

    def test_other_constraint_is_not_a_unique_violation(self, db_session):
        """Test that a NOT NULL failure surfaces as IntegrityError, not a code collision"""
        repository = SQLAlchemyMappingRepository(db_session)

        with pytest.raises(IntegrityError):
            repository.insert(None, "abcd1234")

        assert repository.list_all() == []
        assert repository.insert("https://example.com", "abcd1234").short_code == "abcd1234"


class TestRepositoryFactory:
    """Test repository factory"""

    def test_creates_sql_repository(self, db_session):
        repository = RepositoryFactory.create(RepositoryBackend.SQL, db=db_session)
        assert isinstance(repository, SQLAlchemyMappingRepository)

    def test_sql_requires_session(self):
        with pytest.raises(ValueError):
            RepositoryFactory.create(RepositoryBackend.SQL)

    def test_memory_repository_is_shared(self):
        RepositoryFactory.clear_instance()
        try:
            first = RepositoryFactory.create(RepositoryBackend.MEMORY)
            second = RepositoryFactory.create(RepositoryBackend.MEMORY)

            assert isinstance(first, InMemoryMappingRepository)
            assert first is second
        finally:
            RepositoryFactory.clear_instance()

    def test_memory_clear(self):
        repository = InMemoryMappingRepository()
        repository.insert("https://example.com", "clear001")

        repository.clear()

        assert repository.list_all() == []
        assert repository.insert("https://example.com", "clear001").id == 1
