"""
Tests for the findMany resolver.
"""

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from resolverkit import SQLAlchemyStore, compose_with_sqlalchemy
from resolverkit.errors import ConfigurationError, ValidationError
from resolverkit.resolver import Resolver, ResolverKind
from resolverkit.resolvers import find_many


@pytest.fixture
def resolver(user_store, user_tc):
    return find_many(user_store, user_tc)


class TestFindManyFactory:
    def test_returns_resolver(self, resolver):
        assert isinstance(resolver, Resolver)
        assert resolver.name == "findMany"
        assert resolver.kind is ResolverKind.QUERY

    @pytest.mark.parametrize("arg", ["filter", "limit", "skip", "sort"])
    def test_declares_arg(self, resolver, arg):
        assert resolver.has_arg(arg)

    def test_rejects_invalid_store(self, user_tc):
        with pytest.raises(ConfigurationError, match="SQLAlchemyStore"):
            find_many(object(), user_tc)

    def test_rejects_invalid_type_composer(self, user_store):
        with pytest.raises(ConfigurationError, match="TypeComposer"):
            find_many(user_store, object())

    def test_reuses_registered_input_types(self, user_store, user_tc):
        first = find_many(user_store, user_tc)
        second = find_many(user_store, user_tc)

        assert first.get_arg("filter").annotation == second.get_arg("filter").annotation
        assert first.get_arg("sort").annotation == second.get_arg("sort").annotation


@pytest.mark.asyncio
class TestFindManyResolve:
    async def test_empty_store_returns_empty_list(self, resolver):
        assert await resolver.resolve({}) == []

    async def test_returns_all_documents_when_args_empty(self, resolver, users):
        result = await resolver.resolve({})

        assert isinstance(result, list)
        assert len(result) == 2
        assert {document.name for document in result} == {"userName1", "userName2"}

    async def test_limits_records(self, resolver, users):
        result = await resolver.resolve({"args": {"limit": 1}})

        assert len(result) == 1
        assert result[0].name in {"userName1", "userName2"}

    async def test_skips_records(self, resolver, users):
        result = await resolver.resolve({"args": {"skip": 1000}})

        assert result == []

    async def test_sorts_records(self, resolver, users):
        result1 = await resolver.resolve({"args": {"sort": {"id": 1}}})
        result2 = await resolver.resolve({"args": {"sort": {"id": -1}}})

        assert str(result1[0].id) != str(result2[0].id)

    async def test_skip_precedes_limit(self, resolver, users):
        _, user2 = users

        result = await resolver.resolve({"args": {"limit": 1, "skip": 1, "sort": {"id": 1}}})

        assert [document.id for document in result] == [user2.id]

    async def test_filters_records(self, resolver, users):
        result = await resolver.resolve({"args": {"filter": {"gender": "male"}}})

        assert [document.name for document in result] == ["userName1"]

    async def test_no_match_returns_empty_list(self, resolver, users):
        result = await resolver.resolve({"args": {"filter": {"name": "nobody"}}})

        assert result == []

    async def test_returns_orm_instances(self, resolver, user_model, users):
        result = await resolver.resolve({"args": {"limit": 2}})

        assert isinstance(result[0], user_model)
        assert isinstance(result[1], user_model)

    async def test_documents_readable_with_expire_on_commit_factory(
        self, session_factory, user_model, registry, users
    ):
        store = SQLAlchemyStore(user_model, async_sessionmaker(session_factory.kw["bind"]))
        type_composer = compose_with_sqlalchemy(store, registry=registry)

        find_many_resolver = type_composer.get_resolver("findMany")
        find_by_id_resolver = type_composer.get_resolver("findById")

        result = await find_many_resolver.resolve({"args": {"sort": {"age": 1}}})
        found = await find_by_id_resolver.resolve({"args": {"_id": users[0].id}})

        assert [user.name for user in result] == ["userName2", "userName1"]
        assert found.gender == "male"

    async def test_unknown_filter_key_rejected_before_store_access(
        self, resolver, user_store, users, monkeypatch
    ):
        calls = []

        async def find(*args, **kwargs):
            calls.append(args)
            return []

        monkeypatch.setattr(user_store, "find", find)

        with pytest.raises(ValidationError, match="Unknown filter field"):
            await resolver.resolve({"args": {"filter": {"nickname": "x"}}})
        assert calls == []

    async def test_negative_limit_rejected(self, resolver):
        with pytest.raises(ValidationError):
            await resolver.resolve({"args": {"limit": -1}})

    async def test_projection_is_forwarded(self, resolver, users):
        result = await resolver.resolve({"projection": ["name"], "args": {"sort": {"id": 1}}})

        assert [document.name for document in result] == ["userName1", "userName2"]
        assert "gender" not in result[0].__dict__
