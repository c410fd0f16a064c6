"""
Tests for the removeById mutation.
"""

import dataclasses

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker

from resolverkit import SQLAlchemyStore, compose_with_sqlalchemy
from resolverkit.errors import ConfigurationError, HookError, NotFoundError, ValidationError
from resolverkit.resolver import ResolveParams, ResolverKind
from resolverkit.resolvers import RemovePayload, remove_by_id


@pytest.fixture
def resolver(user_store, user_tc):
    return remove_by_id(user_store, user_tc)


class TestRemoveByIdFactory:
    def test_is_mutation_with_id_arg(self, resolver):
        assert resolver.kind is ResolverKind.MUTATION
        assert resolver.has_arg("_id")

    def test_payload_type_is_registered_once(self, user_store, user_tc, registry):
        first = remove_by_id(user_store, user_tc)
        second = remove_by_id(user_store, user_tc)

        assert first.output_type is second.output_type
        assert registry.get("RemoveByIdUserPayload") is first.output_type

    def test_payload_type_fields(self, resolver):
        names = [field.name for field in dataclasses.fields(resolver.output_type)]
        assert names == ["record_id", "record"]

    def test_rejects_invalid_arguments(self, user_store, user_tc):
        with pytest.raises(ConfigurationError):
            remove_by_id(None, user_tc)
        with pytest.raises(ConfigurationError):
            remove_by_id(user_store, "User")


@pytest.mark.asyncio
class TestRemoveByIdResolve:
    async def test_missing_id_rejected_without_store_access(
        self, resolver, user_store, monkeypatch
    ):
        calls = []

        async def remove(*args, **kwargs):
            calls.append(args)

        monkeypatch.setattr(user_store, "remove", remove)

        with pytest.raises(ValidationError, match=r"User\.removeById resolver requires args\._id"):
            await resolver.resolve({"args": {}})
        assert calls == []

    async def test_unknown_id_raises_not_found(self, resolver, users):
        with pytest.raises(NotFoundError, match="not found"):
            await resolver.resolve({"args": {"_id": 999}})

    async def test_removes_document_and_returns_payload(self, resolver, user_store, user_tc, users):
        user1, _ = users

        payload = await resolver.resolve({"args": {"_id": user1.id}})

        assert isinstance(payload, RemovePayload)
        assert payload.record.name == "userName1"
        assert payload.record_id == user_tc.get_record_id_fn()(payload.record)
        assert payload.record_id == user1.id
        assert await user_store.find_by_id({"id": user1.id}) is None
        assert await user_store.count() == 1

    async def test_payload_readable_with_expire_on_commit_factory(
        self, session_factory, user_model, registry, users
    ):
        store = SQLAlchemyStore(user_model, async_sessionmaker(session_factory.kw["bind"]))
        type_composer = compose_with_sqlalchemy(store, registry=registry)

        payload = await type_composer.get_resolver("removeById").resolve(
            {"args": {"_id": users[0].id}}
        )

        assert payload.record.name == "userName1"
        assert payload.record_id == users[0].id
        assert await store.count() == 1

    async def test_fires_mapper_delete_events(self, resolver, user_model, users):
        _, user2 = users
        deleted = []

        def after_delete(mapper, connection, target):
            deleted.append(target.name)

        event.listen(user_model, "after_delete", after_delete)
        try:
            await resolver.resolve({"args": {"_id": user2.id}})
        finally:
            event.remove(user_model, "after_delete", after_delete)

        assert deleted == ["userName2"]

    async def test_hook_sees_full_document_and_can_replace_it(self, resolver, users):
        user1, _ = users
        seen = {}

        async def before_record_mutate(document, params):
            seen["skills"] = document.skills
            seen["projection"] = params.projection
            return document

        original = ResolveParams(
            args={"_id": user1.id},
            projection=frozenset({"name"}),
            before_record_mutate=before_record_mutate,
        )
        payload = await resolver.resolve(original)

        assert seen["skills"] == ["js", "ruby", "php", "python"]
        assert seen["projection"] == frozenset()
        assert original.projection == frozenset({"name"})
        assert payload.record_id == user1.id

    async def test_failing_hook_aborts_delete(self, resolver, user_store, users):
        user1, _ = users
        error = HookError("not allowed")

        async def before_record_mutate(document, params):
            raise error

        with pytest.raises(HookError) as exc_info:
            await resolver.resolve(
                {"args": {"_id": user1.id}, "before_record_mutate": before_record_mutate}
            )

        assert exc_info.value is error
        assert await user_store.find_by_id({"id": user1.id}) is not None

    async def test_hook_returning_none_raises_not_found(self, resolver, user_store, users):
        user1, _ = users

        async def before_record_mutate(document, params):
            return None

        with pytest.raises(NotFoundError):
            await resolver.resolve(
                {"args": {"_id": user1.id}, "before_record_mutate": before_record_mutate}
            )
        assert await user_store.find_by_id({"id": user1.id}) is not None

    async def test_falsy_delete_result_raises_not_found(
        self, resolver, user_store, users, monkeypatch
    ):
        user1, _ = users

        async def remove(document, session=None):
            return None

        monkeypatch.setattr(user_store, "remove", remove)

        with pytest.raises(NotFoundError, match="vanished"):
            await resolver.resolve({"args": {"_id": user1.id}})

    async def test_second_remove_of_same_id_raises_not_found(self, resolver, users):
        user1, _ = users

        await resolver.resolve({"args": {"_id": user1.id}})
        with pytest.raises(NotFoundError):
            await resolver.resolve({"args": {"_id": user1.id}})

    async def test_caller_session_is_reused(self, resolver, user_store, session_factory, users):
        user1, _ = users

        async with session_factory() as session:
            await resolver.resolve(ResolveParams(args={"_id": user1.id}, session=session))
            await session.rollback()

        assert await user_store.find_by_id({"id": user1.id}) is not None
