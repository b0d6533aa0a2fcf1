"""Pure-function parsing of task status/priority input.

Aliases are matched case-, space- and separator-insensitively.
"""

from __future__ import annotations

from projectboard.models.task import TaskPriority, TaskStatus
from projectboard.errors import BadRequestError

_STATUS_ALIASES = {
    TaskStatus.TODO: ("todo", "new", "open", "pending", "backlog"),
    TaskStatus.IN_PROGRESS: ("inprogress", "doing", "wip", "working", "started"),
    TaskStatus.REVIEW: ("review", "inreview", "testing", "qa"),
    TaskStatus.DONE: ("done", "completed", "complete", "closed", "finished"),
}


def _squash(raw: str) -> str:
    return raw.lower().replace(" ", "").replace("-", "").replace("_", "")


def normalise_status(raw: str) -> TaskStatus:
    """Normalise any status spelling to a ``TaskStatus``; unknown values are a 400."""
    s = _squash(raw)
    for status, aliases in _STATUS_ALIASES.items():
        if s in aliases:
            return status
    raise BadRequestError(
        f"Invalid task status: {raw!r}. Expected one of: "
        + ", ".join(t.value for t in TaskStatus)
    )


def parse_priority(raw: str) -> TaskPriority:
    try:
        return TaskPriority(raw.strip().lower())
    except ValueError:
        raise BadRequestError(
            f"Invalid task priority: {raw!r}. Expected one of: "
            + ", ".join(p.value for p in TaskPriority)
        ) from None
