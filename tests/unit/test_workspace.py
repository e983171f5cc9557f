"""Unit tests for workspace creation and deferred cleanup."""

import gc
import time
import weakref

import pytest

from resumake.contexts.rendering import workspace as workspace_module
from resumake.contexts.rendering.workspace import (
    WorkspaceJanitor,
    create_workspace,
    remove_workspace,
)


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


@pytest.mark.unit
def test_create_workspace_sanitizes_and_is_unique(tmp_path):
    first = create_workspace(tmp_path / "work", "resume 1/../x")
    second = create_workspace(tmp_path / "work", "resume 1/../x")

    assert first != second
    assert first.is_dir() and second.is_dir()
    assert first.parent == tmp_path / "work"
    assert first.name.startswith("resume_1____x_")


@pytest.mark.unit
def test_remove_workspace_missing_is_not_error(tmp_path):
    assert remove_workspace(tmp_path / "never-created") is False


@pytest.mark.unit
def test_remove_workspace_tree(tmp_path):
    workspace = create_workspace(tmp_path, "doc")
    (workspace / "doc.tex").write_text("x", encoding="utf-8")

    assert remove_workspace(workspace) is True
    assert not workspace.exists()


@pytest.mark.unit
def test_janitor_removes_after_delay(tmp_path):
    janitor = WorkspaceJanitor(delay_s=0.1)
    workspace = create_workspace(tmp_path, "doc")

    janitor.schedule(workspace)

    assert workspace.exists()
    assert _wait_until(lambda: not workspace.exists())
    assert janitor.pending() == []


@pytest.mark.unit
def test_janitor_flush_removes_immediately(tmp_path):
    janitor = WorkspaceJanitor(delay_s=60)
    workspace = create_workspace(tmp_path, "doc")
    janitor.schedule(workspace)
    assert janitor.pending() == [workspace]

    janitor.flush()

    assert not workspace.exists()
    assert janitor.pending() == []


@pytest.mark.unit
def test_janitor_removes_each_workspace_once(tmp_path, monkeypatch):
    """Repeated scheduling and a racing timer still delete exactly once."""
    calls = []
    original = workspace_module.remove_workspace

    def counting_remove(path):
        calls.append(path)
        return original(path)

    monkeypatch.setattr(workspace_module, "remove_workspace", counting_remove)

    janitor = WorkspaceJanitor(delay_s=0.05)
    workspace = create_workspace(tmp_path, "doc")
    janitor.schedule(workspace)
    janitor.schedule(workspace)
    janitor.flush()
    time.sleep(0.2)
    janitor.flush()

    assert calls == [workspace]


@pytest.mark.unit
def test_janitor_tolerates_already_deleted_workspace(tmp_path):
    janitor = WorkspaceJanitor(delay_s=60)
    workspace = create_workspace(tmp_path, "doc")
    janitor.schedule(workspace)
    remove_workspace(workspace)

    janitor.flush()

    assert janitor.pending() == []


@pytest.mark.unit
def test_janitor_keeps_nothing_after_flush(tmp_path):
    """Removed workspaces leave no bookkeeping behind."""
    janitor = WorkspaceJanitor(delay_s=0)
    workspaces = [create_workspace(tmp_path, f"doc{i}") for i in range(50)]
    for workspace in workspaces:
        janitor.schedule(workspace)

    janitor.flush()

    assert janitor.pending() == []
    assert janitor._pending == {}
    assert not any(workspace.exists() for workspace in workspaces)


@pytest.mark.unit
def test_janitor_not_kept_alive_by_exit_hook(tmp_path):
    """A discarded janitor can be garbage collected once its timers finish."""
    janitor = WorkspaceJanitor(delay_s=0)
    janitor.schedule(create_workspace(tmp_path, "doc"))
    janitor.flush()
    ref = weakref.ref(janitor)
    del janitor

    assert _wait_until(lambda: gc.collect() is not None and ref() is None)
