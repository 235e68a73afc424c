"""Tests for remote → local correlation."""

from mc_bridge.bridge.correlation import CROSS_REFERENCE, NONE, TITLE, CorrelationResolver
from mc_bridge.core.models import RemoteTask, Task


def test_cross_reference_wins_over_title(local_store):
    linked = local_store.insert_task(Task(id="mc-1", title="Linked"))
    local_store.insert_task(Task(id="mc-2", title="Same title"))
    resolver = CorrelationResolver(local_store)

    result = resolver.resolve(RemoteTask(id="r-1", title="Same title", mc_task_id="mc-1"))

    assert result.method == CROSS_REFERENCE
    assert result.task.id == linked.id
    assert not result.needs_backfill


def test_title_fallback_when_no_cross_reference(local_store):
    local_store.insert_task(Task(id="mc-1", title="Write onboarding doc"))
    resolver = CorrelationResolver(local_store)

    result = resolver.resolve(RemoteTask(id="r-1", title="Write onboarding doc"))

    assert result.found
    assert result.method == TITLE
    assert result.task.id == "mc-1"
    assert result.needs_backfill


def test_dangling_cross_reference_falls_back_to_title(local_store):
    local_store.insert_task(Task(id="mc-9", title="Orphaned"))
    resolver = CorrelationResolver(local_store)

    result = resolver.resolve(RemoteTask(id="r-1", title="Orphaned", mc_task_id="deleted-id"))

    assert result.method == TITLE
    assert result.task.id == "mc-9"


def test_title_match_is_exact_and_workspace_scoped(local_store):
    local_store.insert_task(Task(id="mc-1", title="Deploy"))
    local_store.insert_task(Task(id="mc-2", title="Release", workspace_id="other"))
    resolver = CorrelationResolver(local_store)

    assert resolver.resolve(RemoteTask(id="r-1", title="deploy")).method == NONE
    assert resolver.resolve(RemoteTask(id="r-2", title="Release")).method == NONE


def test_no_match(local_store):
    result = CorrelationResolver(local_store).resolve(RemoteTask(id="r-1", title="Brand new"))
    assert not result.found
    assert result.method == NONE
    assert result.task is None
