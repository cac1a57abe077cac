# src/roi_tracker/tasks/ids.py

from __future__ import annotations

import itertools
import secrets
import time

_sequence = itertools.count(1)


def generate_task_id() -> str:
    """
    Process-unique task id: task-<epoch ms>-<sequence>-<random hex>.

    The sequence alone guarantees uniqueness within one process; the time and
    random parts keep ids from different runs apart.
    """
    ms = int(time.time() * 1000)
    return f"task-{ms}-{next(_sequence)}-{secrets.token_hex(3)}"
