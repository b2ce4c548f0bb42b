"""
Unit tests for DocumentStore.

Tests the authorization-gated CRUD operations, existence hiding in get,
lifecycle invariants and change notifications.
"""

import asyncio
import json

import httpx
import pytest

from docvault.auth.provider import LocalRuleProvider, RemotePolicyProvider
from docvault.documents.store import DocumentStore
from docvault.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from docvault.gateway import DocumentGateway


def ids(documents):
    return [d.id for d in documents]


class TestList:
    @pytest.mark.asyncio
    async def test_admin_sees_everything_in_insertion_order(self, store, admin):
        assert ids(await store.list(admin)) == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_others_see_public_and_owned(self, store, editor, viewer):
        assert ids(await store.list(editor)) == ["1", "3"]
        assert ids(await store.list(viewer)) == ["1", "3"]

    @pytest.mark.asyncio
    async def test_owner_sees_own_private_document(self, store, editor):
        created = await store.create(editor, "Draft", "wip", is_public=False)
        assert ids(await store.list(editor)) == ["1", "3", created.id]

    @pytest.mark.asyncio
    async def test_visibility_recomputed_on_every_call(self, store, admin, viewer):
        assert "2" not in ids(await store.list(viewer))
        await store.update(admin, "2", "Security Policy", "now public", is_public=True)
        assert "2" in ids(await store.list(viewer))
        await store.update(admin, "2", "Security Policy", "private again", is_public=False)
        assert "2" not in ids(await store.list(viewer))


class TestGet:
    @pytest.mark.asyncio
    async def test_public_document_readable_by_anyone(self, store, viewer):
        document = await store.get(viewer, "3")
        assert document is not None
        assert document.owner_id == "user-id"
        assert document.content == "A comprehensive guide for users of our system."

    @pytest.mark.asyncio
    async def test_missing_document_returns_none(self, store, admin):
        assert await store.get(admin, "does-not-exist") is None

    @pytest.mark.asyncio
    async def test_forbidden_document_indistinguishable_from_missing(self, store, admin, viewer):
        created = await store.create(admin, "A", "x", is_public=False)
        assert created.owner_id == "admin-id"
        assert await store.get(viewer, created.id) is None
        assert await store.get(viewer, "does-not-exist") is None

    @pytest.mark.asyncio
    async def test_returned_document_is_a_copy(self, store, admin):
        document = await store.get(admin, "1")
        document.title = "tampered"
        assert (await store.get(admin, "1")).title == "Getting Started Guide"


class TestCreate:
    @pytest.mark.asyncio
    async def test_round_trip(self, store, editor):
        created = await store.create(editor, "Plan", "Quarterly plan", is_public=True)
        fetched = await store.get(editor, created.id)
        assert fetched == created
        assert (fetched.title, fetched.content, fetched.is_public) == (
            "Plan",
            "Quarterly plan",
            True,
        )
        assert fetched.owner_id == editor.id
        assert fetched.created_at == fetched.updated_at

    @pytest.mark.asyncio
    async def test_whitespace_title_rejected(self, store, editor):
        before = await store.count()
        with pytest.raises(ValidationError) as exc_info:
            await store.create(editor, "   ", "content")
        assert exc_info.value.field == "title"
        assert await store.count() == before

    @pytest.mark.asyncio
    async def test_title_is_trimmed(self, store, editor):
        created = await store.create(editor, "  Notes  ", "")
        assert created.title == "Notes"

    @pytest.mark.asyncio
    async def test_viewer_cannot_create(self, store, viewer):
        before = await store.count()
        with pytest.raises(PermissionDeniedError) as exc_info:
            await store.create(viewer, "Mine", "content")
        assert exc_info.value.subject_id == "viewer-id"
        assert exc_info.value.action == "create"
        assert await store.count() == before

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, empty_store, editor):
        created = [await empty_store.create(editor, f"Doc {i}", "") for i in range(20)]
        assert len(set(ids(created))) == 20

    @pytest.mark.asyncio
    async def test_deleted_id_is_not_reused(self, empty_store, editor):
        first = await empty_store.create(editor, "First", "")
        await empty_store.delete(editor, first.id)
        second = await empty_store.create(editor, "Second", "")
        assert second.id != first.id


class TestUpdate:
    @pytest.mark.asyncio
    async def test_owner_update_keeps_identity_fields(self, store, editor):
        created = await store.create(editor, "Draft", "v1", is_public=False)
        updated = await store.update(editor, created.id, "Final", "v2", is_public=True)
        assert updated.id == created.id
        assert updated.owner_id == created.owner_id
        assert updated.created_at == created.created_at
        assert updated.updated_at > created.updated_at
        assert (updated.title, updated.content, updated.is_public) == ("Final", "v2", True)

    @pytest.mark.asyncio
    async def test_admin_can_update_any_document(self, store, admin):
        updated = await store.update(admin, "3", "User Manual v2", "edited", is_public=True)
        assert updated.owner_id == "user-id"

    @pytest.mark.asyncio
    async def test_editor_cannot_update_other_editors_private_document(
        self, store, editor, other_editor
    ):
        created = await store.create(other_editor, "Secret", "x", is_public=False)
        with pytest.raises(PermissionDeniedError):
            await store.update(editor, created.id, "Hijacked", "y", is_public=True)
        assert (await store.get(other_editor, created.id)).title == "Secret"

    @pytest.mark.asyncio
    async def test_viewer_cannot_update(self, store, viewer):
        with pytest.raises(PermissionDeniedError):
            await store.update(viewer, "1", "x", "y", is_public=True)

    @pytest.mark.asyncio
    async def test_missing_document(self, store, admin):
        with pytest.raises(NotFoundError) as exc_info:
            await store.update(admin, "missing", "x", "y")
        assert exc_info.value.resource_id == "missing"

    @pytest.mark.asyncio
    async def test_empty_title_rejected(self, store, editor):
        with pytest.raises(ValidationError):
            await store.update(editor, "3", "", "y", is_public=True)


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_twice(self, store, admin):
        assert await store.delete(admin, "2") == {
            "success": True,
            "message": "Document deleted successfully",
        }
        with pytest.raises(NotFoundError):
            await store.delete(admin, "2")

    @pytest.mark.asyncio
    async def test_owner_can_delete(self, store, editor):
        await store.delete(editor, "3")
        assert await store.get(editor, "3") is None

    @pytest.mark.asyncio
    async def test_editor_cannot_delete_unowned(self, store, editor):
        with pytest.raises(PermissionDeniedError):
            await store.delete(editor, "1")
        assert await store.count() == 3

    @pytest.mark.asyncio
    async def test_policy_lets_editor_delete_unowned_public(self, permissive_store, editor):
        await permissive_store.delete(editor, "1")
        assert await permissive_store.count() == 2

    @pytest.mark.asyncio
    async def test_viewer_cannot_delete(self, store, viewer):
        with pytest.raises(PermissionDeniedError):
            await store.delete(viewer, "3")


class TestNotifications:
    @pytest.mark.asyncio
    async def test_each_mutation_publishes_once(self, store, notifier, editor):
        events = []
        notifier.subscribe(events.append)

        created = await store.create(editor, "Doc", "x")
        await store.update(editor, created.id, "Doc", "y")
        await store.delete(editor, created.id)

        assert [e.operation for e in events] == ["create", "update", "delete"]
        assert all(e.document_id == created.id for e in events)
        assert events[0].paths == ("/documents",)
        assert events[1].paths == ("/documents", f"/documents/{created.id}")

    @pytest.mark.asyncio
    async def test_failed_mutations_publish_nothing(self, store, notifier, viewer):
        events = []
        notifier.subscribe(events.append)

        with pytest.raises(PermissionDeniedError):
            await store.create(viewer, "Doc", "x")
        with pytest.raises(NotFoundError):
            await store.delete(viewer, "missing")
        await store.list(viewer)
        await store.get(viewer, "1")

        assert events == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_fail_mutation(self, store, notifier, editor):
        def broken(event):
            raise RuntimeError("listener crashed")

        notifier.subscribe(broken)
        created = await store.create(editor, "Doc", "x")
        assert await store.get(editor, created.id) is not None

    @pytest.mark.asyncio
    async def test_event_time_comes_from_store_clock(self, store, notifier, editor):
        events = []
        notifier.subscribe(events.append)

        created = await store.create(editor, "Doc", "x")
        updated = await store.update(editor, created.id, "Doc", "y")
        await store.delete(editor, created.id)

        assert events[0].occurred_at == created.created_at
        assert events[1].occurred_at == updated.updated_at
        assert events[2].occurred_at > updated.updated_at


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_stores_are_isolated(self, editor):
        first = DocumentStore(LocalRuleProvider())
        second = DocumentStore(LocalRuleProvider())
        await first.create(editor, "Only here", "")
        assert await first.count() == 4
        assert await second.count() == 3

    @pytest.mark.asyncio
    async def test_reset_restores_seed_documents(self, store, admin, editor):
        await store.create(editor, "Extra", "")
        await store.delete(admin, "1")
        await store.reset()
        assert ids(await store.list(admin)) == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_unseeded_store_starts_empty(self, empty_store, admin):
        assert await empty_store.list(admin) == []

    @pytest.mark.asyncio
    async def test_concurrent_creates_are_serialized(self, empty_store, editor, admin):
        await asyncio.gather(*(empty_store.create(editor, f"Doc {i}", "") for i in range(25)))
        documents = await empty_store.list(admin)
        assert len(documents) == 25
        assert len(set(ids(documents))) == 25


class RecordingProvider(LocalRuleProvider):
    """Local rules that yield to the event loop on every decision."""

    def __init__(self):
        super().__init__()
        self.calls = []

    async def decide(self, subject, action, resource_type, attrs=None):
        self.calls.append(subject.id)
        await asyncio.sleep(0)
        return await super().decide(subject, action, resource_type, attrs)


class TestConcurrentReadsAndWrites:
    @pytest.mark.asyncio
    async def test_readers_never_interleave_with_mutations(self, admin, editor, viewer, clock):
        provider = RecordingProvider()
        store = DocumentStore(provider, clock=clock)

        listing, got, _, _ = await asyncio.gather(
            store.list(viewer),
            store.get(editor, "3"),
            store.update(admin, "3", "User Manual", "hidden", is_public=False),
            store.delete(admin, "1"),
        )

        for subject_id in (viewer.id, editor.id):
            positions = [i for i, caller in enumerate(provider.calls) if caller == subject_id]
            assert positions == list(range(positions[0], positions[-1] + 1))
        assert ids(listing) in (["1", "3"], ["1"], ["3"], [])
        assert got is not None
        assert (got.content, got.is_public) in (
            ("A comprehensive guide for users of our system.", True),
            ("hidden", False),
        )
        assert await store.list(viewer) == []

    @pytest.mark.asyncio
    async def test_get_sees_whole_update(self, store, admin, editor):
        async def reader():
            return [await store.get(editor, "3") for _ in range(5)]

        results, _ = await asyncio.gather(
            reader(), store.update(admin, "3", "Renamed", "rewritten", is_public=True)
        )
        for document in results:
            assert (document.title, document.content) in (
                ("User Manual", "A comprehensive guide for users of our system."),
                ("Renamed", "rewritten"),
            )


# ============================================================================
# REMOTE POLICY DECISION POINT
# ============================================================================


def unreachable_pdp(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def failing_pdp(request: httpx.Request) -> httpx.Response:
    return httpx.Response(500, json={"detail": "internal error"})


def read_only_pdp(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"allow": body["action"] == "read"})


def remote_provider(handler, fail_open: bool = False) -> RemotePolicyProvider:
    return RemotePolicyProvider(
        "http://pdp.test", transport=httpx.MockTransport(handler), fail_open=fail_open
    )


class TestRemoteProviderStore:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("handler", [unreachable_pdp, failing_pdp])
    async def test_pdp_failure_fails_closed(self, handler, admin, editor, clock):
        async with remote_provider(handler) as provider:
            store = DocumentStore(provider, clock=clock)

            assert await store.list(admin) == []
            assert await store.get(admin, "1") is None
            with pytest.raises(PermissionDeniedError):
                await store.create(editor, "Doc", "x")
            with pytest.raises(PermissionDeniedError):
                await store.update(editor, "3", "Doc", "x")
            with pytest.raises(PermissionDeniedError):
                await store.delete(admin, "1")
            assert await store.count() == 3

    @pytest.mark.asyncio
    async def test_pdp_failure_with_fail_open(self, viewer, clock):
        async with remote_provider(unreachable_pdp, fail_open=True) as provider:
            store = DocumentStore(provider, clock=clock)

            assert ids(await store.list(viewer)) == ["1", "2", "3"]
            created = await store.create(viewer, "Allowed while degraded", "")
            assert created.owner_id == viewer.id
            await store.delete(viewer, "2")
            assert await store.count() == 3

    @pytest.mark.asyncio
    async def test_pdp_verdicts_gate_operations(self, viewer, editor, clock):
        async with remote_provider(read_only_pdp) as provider:
            store = DocumentStore(provider, clock=clock)

            assert ids(await store.list(viewer)) == ["1", "2", "3"]
            assert (await store.get(viewer, "2")).title == "Security Policy"
            with pytest.raises(PermissionDeniedError):
                await store.create(editor, "Doc", "x")
            with pytest.raises(PermissionDeniedError):
                await store.update(editor, "3", "Doc", "x")
            with pytest.raises(NotFoundError):
                await store.delete(editor, "missing")

    @pytest.mark.asyncio
    async def test_gateway_over_unreachable_pdp(self, directory, clock):
        async with remote_provider(unreachable_pdp) as provider:
            gateway = DocumentGateway(DocumentStore(provider, clock=clock), directory)

            assert await gateway.list_documents("admin-id") == []
            assert await gateway.get_document("user-id", "3") is None
            assert not await gateway.check_permission("admin-id", "access", "admin_panel")
            with pytest.raises(PermissionDeniedError):
                await gateway.create_document("user-id", {"title": "Doc"})
