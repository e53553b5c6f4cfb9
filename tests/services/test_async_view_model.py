"""View-Model Orchestrator (async) — verifies the async pipelines match the blocking ones.

Invariants:
    - Same validation gate, cascade order and root-only finalization as ViewModel
    - Cultures cloned sequentially, failures aggregated, cumulative finalization
    - Expansion faults captured, never raised
"""

from cultureview.core.domain_types import SupportedCulture
from cultureview.core.errors import CascadeFailure, ExpansionFault, ValidationFailure
from cultureview.core.operation_result import OperationResult
from cultureview.services.async_view_model import AsyncViewModel
from cultureview.services.hooks import AsyncNoCascadeHooks

from tests.services.fakes import (
    NOTE_BINDING, AsyncRecordingGateway, Note, mock_async_scopes, note_view,
)


class AsyncRecordingHooks(AsyncNoCascadeHooks):
    def __init__(self, sub_result=None, related_result=None, expand_error=None):
        self.calls: list[str] = []
        self.sub_result = sub_result or OperationResult.ok(True)
        self.related_result = related_result or OperationResult.ok(True)
        self.expand_error = expand_error

    async def expand_view(self, vm, scope):
        self.calls.append("expand_view")
        if self.expand_error:
            raise self.expand_error
        return True

    async def save_sub_models(self, vm, parent, scope):
        self.calls.append(f"save_sub_models:{parent.specificulture}")
        return self.sub_result

    async def remove_related_models(self, vm, scope):
        self.calls.append("remove_related_models")
        return self.related_result

    async def clone_sub_models(self, vm, parent, cultures, scope):
        self.calls.append(f"clone_sub_models:{parent.specificulture}")
        return OperationResult.ok(True)


def _cultures(*codes):
    return [SupportedCulture(code) for code in codes]


def _vm(gateway=None, hooks=None, **kwargs):
    scopes, session = mock_async_scopes()
    vm = AsyncViewModel(
        NOTE_BINDING, gateway or AsyncRecordingGateway(), scopes, hooks, **kwargs,
    )
    return vm, session


async def test_save_valid_view_commits_once():
    gateway = AsyncRecordingGateway()
    vm, session = _vm(gateway, view=note_view())
    result = await vm.save_model()
    assert result.success is True
    assert gateway.saved == [(1, "en-us")]
    session.commit.assert_awaited_once()
    session.close.assert_awaited_once()


async def test_invalid_view_never_reaches_gateway():
    gateway = AsyncRecordingGateway()
    view = note_view()
    view.body = ""
    vm, session = _vm(gateway, view=view)
    result = await vm.save_model()
    assert isinstance(result.exception, ValidationFailure)
    assert gateway.saved == []
    session.commit.assert_not_awaited()


async def test_gateway_exception_captured():
    gateway = AsyncRecordingGateway(raise_cultures={"en-us"})
    vm, session = _vm(gateway, view=note_view())
    result = await vm.save_model()
    assert result.success is False
    assert isinstance(result.exception, RuntimeError)
    session.rollback.assert_awaited_once()


async def test_sub_model_failure_blocks_clone():
    hooks = AsyncRecordingHooks(sub_result=OperationResult.failure(["tag rejected"]))
    gateway = AsyncRecordingGateway()
    view = note_view(is_clone=True, cultures=_cultures("en-us", "vi-vn"))
    vm, session = _vm(gateway, hooks, view=view)
    result = await vm.save_model(save_sub_models=True)
    assert isinstance(result.exception, CascadeFailure)
    assert gateway.saved == [(1, "en-us")]
    assert hooks.calls == ["save_sub_models:en-us"]
    session.rollback.assert_awaited_once()


async def test_save_with_clone_replicates_in_order():
    hooks = AsyncRecordingHooks()
    gateway = AsyncRecordingGateway()
    view = note_view(is_clone=True, cultures=_cultures("en-us", "vi-vn", "fr-fr"))
    vm, session = _vm(gateway, hooks, view=view)
    result = await vm.save_model()
    assert result.success is True
    assert gateway.saved == [(1, "en-us"), (1, "vi-vn"), (1, "fr-fr")]
    assert hooks.calls == ["clone_sub_models:vi-vn", "clone_sub_models:fr-fr"]
    session.commit.assert_awaited_once()


async def test_nested_save_never_clones_or_finalizes():
    gateway = AsyncRecordingGateway()
    scopes, session = mock_async_scopes()
    outer = await scopes.init_transaction()
    view = note_view(is_clone=True, cultures=_cultures("en-us", "vi-vn"))
    vm = AsyncViewModel(NOTE_BINDING, gateway, scopes, view=view)
    result = await vm.save_model(scope=outer)
    assert result.success is True
    assert gateway.saved == [(1, "en-us")]
    session.commit.assert_not_awaited()
    session.close.assert_not_awaited()


async def test_clone_failure_midway_continues():
    gateway = AsyncRecordingGateway(fail_cultures={"fr-fr"})
    vm, session = _vm(gateway, view=note_view())
    result = await vm.clone(vm.parse_model(), _cultures("vi-vn", "fr-fr", "ja-jp"))
    assert result.errors == ["save failed for fr-fr"]
    assert gateway.saved == [(1, "vi-vn"), (1, "fr-fr"), (1, "ja-jp")]
    assert session.commit.await_count == 1
    assert session.rollback.await_count == 2


async def test_clone_skips_existing():
    gateway = AsyncRecordingGateway()
    gateway.rows[(1, "vi-vn")] = Note(1, "vi-vn", "already here")
    vm, _ = _vm(gateway, view=note_view())
    result = await vm.clone(vm.parse_model(), _cultures("vi-vn"))
    assert result.success is True
    assert gateway.saved == []
    assert [v.specificulture for v in result.data] == ["vi-vn"]


async def test_related_failure_never_deletes_model():
    hooks = AsyncRecordingHooks(related_result=OperationResult.failure(["child locked"]))
    gateway = AsyncRecordingGateway()
    gateway.rows[(1, "en-us")] = Note(1, "en-us", "hello")
    vm, session = _vm(gateway, hooks, model=Note(1, "en-us", "hello"))
    result = await vm.remove_model(remove_related=True)
    assert result.errors == ["child locked"]
    assert gateway.removed == []
    session.rollback.assert_awaited_once()


async def test_remove_commits():
    gateway = AsyncRecordingGateway()
    gateway.rows[(1, "en-us")] = Note(1, "en-us", "hello")
    vm, session = _vm(gateway, model=Note(1, "en-us", "hello"))
    assert (await vm.remove_model()).success is True
    session.commit.assert_awaited_once()


async def test_init_view_returns_none_on_expansion_fault():
    gateway = AsyncRecordingGateway()
    hooks = AsyncRecordingHooks(expand_error=RuntimeError("x"))
    scopes, session = mock_async_scopes()
    vm = await AsyncViewModel.init_view(
        NOTE_BINDING, gateway, scopes, hooks, model=Note(1, "en-us", "hello"),
    )
    assert vm is None
    assert isinstance(gateway.logged[0], ExpansionFault)
    session.rollback.assert_awaited_once()


async def test_init_view_expands():
    hooks = AsyncRecordingHooks()
    vm = await AsyncViewModel.init_view(
        NOTE_BINDING, AsyncRecordingGateway(), mock_async_scopes()[0], hooks,
        model=Note(1, "en-us", "hello"),
    )
    assert vm.view.body == "hello"
    assert hooks.calls == ["expand_view"]


async def test_resave_replaces_errors():
    """Each save reports its own validation errors; a valid save clears them."""
    gateway = AsyncRecordingGateway()
    view = note_view()
    view.body = ""
    vm, _ = _vm(gateway, view=view)
    await vm.save_model()

    vm.view.body = "x" * 60
    second = await vm.save_model()
    assert len(second.errors) == 1
    assert "at most 50 characters" in second.errors[0]

    vm.view.body = "fixed"
    third = await vm.save_model()
    assert third.success is True
    assert vm.view.is_valid is True
    assert vm.view.errors == []


async def test_expand_model_changes_reach_gateway():
    """expand_model runs on the fresh model before the gateway saves it."""
    gateway = AsyncRecordingGateway()
    seen = []

    class StampingHooks(AsyncNoCascadeHooks):
        def expand_model(self, vm, model):
            seen.append((model.body, len(gateway.saved)))
            model.priority = 9

    vm, _ = _vm(gateway, StampingHooks(), view=note_view())
    assert (await vm.save_model()).success is True
    assert seen == [("hello", 0)]
    assert gateway.rows[(1, "en-us")].priority == 9
    assert vm.view.priority == 9
