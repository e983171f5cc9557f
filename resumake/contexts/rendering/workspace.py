"""
Compilation workspaces.

Each compilation gets its own uniquely named directory under a shared work root.
Workspaces are deleted by a WorkspaceJanitor after a grace period, so the caller
can hand the PDF back before any file is removed.
"""

import atexit
import shutil
import tempfile
import threading
import weakref
from pathlib import Path
from typing import Dict, List

from resumake.contexts.rendering.logger import _log_debug, _log_error
from resumake.utils.text_processing import sanitize_file_name


def create_workspace(work_root: Path, base_name: str) -> Path:
    """
    Create a fresh, uniquely named workspace directory.

    The name is the sanitized base name plus a random suffix, so concurrent requests
    with the same base name never share a directory.

    Args:
        work_root: Parent directory for all workspaces (created if missing)
        base_name: Caller-supplied name, e.g. "resume_<document id>"

    Returns:
        Path to the new, empty workspace
    """
    work_root = Path(work_root)
    work_root.mkdir(parents=True, exist_ok=True)
    prefix = f"{sanitize_file_name(base_name)}_"
    return Path(tempfile.mkdtemp(prefix=prefix, dir=work_root))


def remove_workspace(workspace: Path) -> bool:
    """
    Delete a workspace tree. A workspace that is already gone is not an error.

    Returns:
        True if the directory was removed by this call
    """
    try:
        shutil.rmtree(workspace)
    except FileNotFoundError:
        return False
    except OSError as e:
        _log_error(f"Could not remove workspace {workspace}: {e}")
        return False
    _log_debug(f"Removed workspace {workspace}")
    return True


_live_janitors: "weakref.WeakSet[WorkspaceJanitor]" = weakref.WeakSet()


@atexit.register
def _flush_live_janitors() -> None:
    for janitor in list(_live_janitors):
        janitor.flush()


class WorkspaceJanitor:
    """
    Deletes workspaces after a delay, exactly once each.

    schedule() returns immediately; deletion happens on a timer thread. Pending
    deletions are run by flush(), which also runs at interpreter exit for every
    janitor still alive. Nothing is kept for a workspace once it has been removed.
    """

    def __init__(self, delay_s: float = 5.0):
        self.delay_s = delay_s
        self._lock = threading.Lock()
        self._pending: Dict[Path, threading.Timer] = {}
        _live_janitors.add(self)

    def schedule(self, workspace: Path) -> None:
        """Queue a workspace for deletion after delay_s. Calls while it is pending are ignored."""
        workspace = Path(workspace)
        with self._lock:
            if workspace in self._pending:
                return
            timer = threading.Timer(self.delay_s, self._expire, args=(workspace,))
            timer.daemon = True
            self._pending[workspace] = timer
            timer.start()
        _log_debug(f"Scheduled removal of {workspace} in {self.delay_s}s")

    def _claim(self, workspace: Path) -> bool:
        # Whoever pops the entry (timer or flush) is the one that deletes
        with self._lock:
            return self._pending.pop(workspace, None) is not None

    def _expire(self, workspace: Path) -> None:
        if self._claim(workspace):
            remove_workspace(workspace)

    def pending(self) -> List[Path]:
        """Workspaces scheduled but not yet removed."""
        with self._lock:
            return list(self._pending)

    def flush(self) -> None:
        """Remove every pending workspace now, cancelling its timer."""
        with self._lock:
            timers = dict(self._pending)
        for workspace, timer in timers.items():
            timer.cancel()
            if self._claim(workspace):
                remove_workspace(workspace)
