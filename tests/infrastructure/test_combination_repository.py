"""Integration tests for CombinationRepository against in-memory SQLite."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from variants.domain.exceptions import (
    CannotBulkDeleteCombinationError,
    CannotDeleteCombinationError,
    CombinationNotFoundError,
    CoreError,
)
from variants.domain.model.value_objects import AttributeId, CombinationId, ProductId
from variants.domain.service.combination_validator import CombinationValidator
from variants.infrastructure.persistence.combination_repository import (
    CombinationRepository,
)
from variants.infrastructure.persistence.sql_combination_store import (
    SqlCombinationStore,
)
from variants.infrastructure.persistence.sql_default_combination_resolver import (
    SqlDefaultCombinationResolver,
)
from tests.fakes import FakeDefaultResolver


def _attrs(*ids):
    return [AttributeId(i) for i in ids]


def _repo_with_resolver(engine, tables, resolver):
    return CombinationRepository(
        engine=engine,
        tables=tables,
        store=SqlCombinationStore(engine, tables),
        validator=CombinationValidator(),
        default_resolver=resolver,
    )


class TestGetProductId:

    def test_returns_parent_product(self, repo, add_combination):
        cid = add_combination(7, [1])
        assert repo.get_product_id(cid) == ProductId(7)

    def test_unknown_combination_raises_not_found(self, repo):
        with pytest.raises(CombinationNotFoundError, match="#123"):
            repo.get_product_id(CombinationId(123))


class TestGetCombinationIds:

    def test_strictly_ascending(self, repo, add_combination):
        a = add_combination(1, [1])
        add_combination(2, [1])
        b = add_combination(1, [2])
        c = add_combination(1, [3])

        ids = repo.get_combination_ids(ProductId(1))

        assert ids == [a, b, c]
        assert all(x.value < y.value for x, y in zip(ids, ids[1:]))

    def test_product_without_combinations_is_empty(self, repo, add_combination):
        add_combination(1, [1])
        assert repo.get_combination_ids(ProductId(2)) == []


class TestGetCombinationIdsByAttributes:

    def test_input_order_is_irrelevant(self, repo, add_combination):
        add_combination(1, [1, 2])
        add_combination(1, [1, 3])
        assert repo.get_combination_ids_by_attributes(
            ProductId(1), _attrs(2, 1)
        ) == repo.get_combination_ids_by_attributes(ProductId(1), _attrs(1, 2))

    def test_exact_set_only(self, repo, add_combination):
        c = add_combination(1, [1, 2])
        add_combination(1, [1, 2, 3])
        add_combination(1, [1])

        assert repo.get_combination_ids_by_attributes(ProductId(1), _attrs(1, 2)) == [c]
        assert c not in repo.get_combination_ids_by_attributes(
            ProductId(1), _attrs(1, 2, 3)
        )
        assert c not in repo.get_combination_ids_by_attributes(ProductId(1), _attrs(1))

    def test_other_products_are_ignored(self, repo, add_combination):
        add_combination(2, [1, 2])
        assert repo.get_combination_ids_by_attributes(ProductId(1), _attrs(1, 2)) == []

    def test_no_match_returns_empty(self, repo, add_combination):
        add_combination(1, [1, 2])
        assert repo.get_combination_ids_by_attributes(ProductId(1), _attrs(4)) == []

    def test_duplicate_sets_all_returned(self, repo, add_combination):
        first = add_combination(1, [3, 4])
        second = add_combination(1, [4, 3])
        assert repo.get_combination_ids_by_attributes(
            ProductId(1), _attrs(4, 3)
        ) == [first, second]

    def test_ids_sharing_digits_do_not_collide(self, repo, add_combination):
        c = add_combination(1, [1, 12])
        add_combination(1, [11, 2])
        assert repo.get_combination_ids_by_attributes(ProductId(1), _attrs(12, 1)) == [c]

    def test_empty_selection_matches_nothing(self, repo, add_combination):
        add_combination(1, [])
        add_combination(1, [1])
        assert repo.get_combination_ids_by_attributes(ProductId(1), []) == []


class TestGetDefaultCombinationId:

    def test_none_when_nothing_flagged(self, repo, add_combination):
        add_combination(1, [1], default_on=None)
        add_combination(1, [2], default_on=False)
        assert repo.get_default_combination_id(ProductId(1)) is None

    def test_returns_flagged_combination(self, repo, add_combination):
        add_combination(1, [1])
        flagged = add_combination(1, [2], default_on=True)
        assert repo.get_default_combination_id(ProductId(1)) == flagged

    def test_smallest_id_wins_when_several_flagged(self, repo, add_combination, caplog):
        add_combination(1, [1])
        first = add_combination(1, [2], default_on=True)
        add_combination(1, [3], default_on=True)

        assert repo.get_default_combination_id(ProductId(1)) == first
        assert "several combinations flagged default" in caplog.text

    def test_flag_on_other_product_ignored(self, repo, add_combination):
        add_combination(2, [1], default_on=True)
        assert repo.get_default_combination_id(ProductId(1)) is None


class TestFindDefaultCombination:

    def test_returns_resolved_combination(self, engine, tables, add_combination):
        add_combination(1, [1])
        best = add_combination(1, [2], quantity=3)
        repo = _repo_with_resolver(engine, tables, FakeDefaultResolver(best.value))

        found = repo.find_default_combination(ProductId(1))

        assert found is not None
        assert found.id == best

    def test_none_when_no_candidate(self, repo):
        assert repo.find_default_combination(ProductId(1)) is None

    def test_collaborator_failure_hidden_behind_core_error(self, engine, tables):
        resolver = FakeDefaultResolver(error=RuntimeError("connection to shop lost"))
        repo = _repo_with_resolver(engine, tables, resolver)

        with pytest.raises(CoreError) as exc_info:
            repo.find_default_combination(ProductId(1))

        assert "connection to shop lost" not in str(exc_info.value)
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__

    def test_stale_resolved_id_raises_not_found(self, engine, tables, add_combination):
        add_combination(1, [1])
        repo = _repo_with_resolver(engine, tables, FakeDefaultResolver(999))

        with pytest.raises(CombinationNotFoundError, match="#999"):
            repo.find_default_combination(ProductId(1))

    def test_invalid_resolved_id_hidden_behind_core_error(self, engine, tables):
        repo = _repo_with_resolver(engine, tables, FakeDefaultResolver(-1))

        with pytest.raises(CoreError) as exc_info:
            repo.find_default_combination(ProductId(1))

        assert exc_info.value.__cause__ is None

    def test_strategies_may_disagree(self, engine, tables, add_combination):
        # Flag says #1, stock rule prefers the in-stock sibling: both answers stand.
        flagged = add_combination(1, [1], default_on=True, quantity=0)
        in_stock = add_combination(1, [2], quantity=10)
        repo = _repo_with_resolver(
            engine, tables, SqlDefaultCombinationResolver(engine, tables, minimum_quantity=1)
        )

        assert repo.get_default_combination_id(ProductId(1)) == flagged
        resolved = repo.find_default_combination(ProductId(1))
        assert resolved is not None
        assert resolved.id == in_stock


class TestBulkDelete:

    def _count(self, engine, table):
        with engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(table)).scalar()

    def test_deletes_all(self, repo, engine, tables, add_combination):
        ids = [add_combination(1, [1, 2]), add_combination(1, [3])]

        result = repo.bulk_delete(ids)

        assert result.ok
        assert result.deleted == tuple(ids)
        assert repo.get_combination_ids(ProductId(1)) == []
        assert self._count(engine, tables.combination_attribute) == 0

    def test_missing_id_does_not_stop_the_batch(self, repo, add_combination):
        a = add_combination(1, [1])
        b = add_combination(1, [2])
        c = add_combination(1, [3])
        repo.delete(b)

        with pytest.raises(CannotBulkDeleteCombinationError) as exc_info:
            repo.bulk_delete([a, b, c])

        result = exc_info.value.result
        assert result.failed_ids == (b,)
        assert isinstance(result.errors_by_id()[b], CombinationNotFoundError)
        assert result.deleted == (a, c)
        for cid in (a, c):
            with pytest.raises(CombinationNotFoundError):
                repo.get(cid)

    def test_every_failure_is_reported(self, repo, add_combination):
        a = add_combination(1, [1])
        missing = [CombinationId(500), CombinationId(501)]

        with pytest.raises(CannotBulkDeleteCombinationError, match="#500, #501") as exc_info:
            repo.bulk_delete([missing[0], a, missing[1]])

        assert exc_info.value.result.failed_ids == tuple(missing)

    def test_store_failures_collected_per_id(self, engine, tables, add_combination):
        class FlakyStore(SqlCombinationStore):
            def delete(self, entity):
                if entity.id.value % 2 == 0:
                    raise RuntimeError("locked")
                super().delete(entity)

        repo = CombinationRepository(
            engine=engine,
            tables=tables,
            store=FlakyStore(engine, tables),
            validator=CombinationValidator(),
            default_resolver=FakeDefaultResolver(),
        )
        ids = [add_combination(1, [i]) for i in (1, 2, 3, 4)]

        with pytest.raises(CannotBulkDeleteCombinationError) as exc_info:
            repo.bulk_delete(ids)

        result = exc_info.value.result
        assert [cid.value for cid in result.failed_ids] == [2, 4]
        assert all(
            isinstance(err, CannotDeleteCombinationError) for _, err in result.failures
        )
        assert repo.get_combination_ids(ProductId(1)) == [CombinationId(2), CombinationId(4)]

    def test_load_failure_does_not_stop_the_batch(self, engine, tables, add_combination):
        class LockedStore(SqlCombinationStore):
            def load(self, entity_id):
                if entity_id == 2:
                    raise OperationalError("SELECT", {}, Exception("database is locked"))
                return super().load(entity_id)

        repo = CombinationRepository(
            engine=engine,
            tables=tables,
            store=LockedStore(engine, tables),
            validator=CombinationValidator(),
            default_resolver=FakeDefaultResolver(),
        )
        ids = [add_combination(1, [i]) for i in (1, 2, 3)]

        with pytest.raises(CannotBulkDeleteCombinationError) as exc_info:
            repo.bulk_delete(ids)

        result = exc_info.value.result
        assert result.failed_ids == (CombinationId(2),)
        assert result.deleted == (CombinationId(1), CombinationId(3))
        error = result.errors_by_id()[CombinationId(2)]
        assert isinstance(error, CannotDeleteCombinationError)
        assert "database is locked" in str(error)
        assert repo.get_combination_ids(ProductId(1)) == [CombinationId(2)]

    def test_empty_batch(self, repo):
        assert repo.bulk_delete([]).ok
