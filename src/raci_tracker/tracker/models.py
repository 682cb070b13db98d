# src/raci_tracker/tracker/models.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from .due_dates import is_valid_due_date

logger = logging.getLogger(__name__)


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Values match the stored/exported JSON strings.
    """

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    ARCHIVED = "ARCHIVED"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    @classmethod
    def from_wire(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(str(raw).strip().upper())
        except ValueError:
            return cls.TODO


ACTIVE_STATUSES: tuple[TaskStatus, ...] = (
    TaskStatus.TODO,
    TaskStatus.IN_PROGRESS,
    TaskStatus.DONE,
)


def _unique(names: Iterable[Any]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for n in names:
        s = str(n)
        if s and s not in seen:
            seen[s] = None
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class RaciRoles:
    """
    RACI assignment for a single task.

    responsible: who does the work (ordered, de-duplicated)
    accountable: who signs off (one name, "" when unset)
    consulted:   who gives input
    informed:    who needs updates

    Names are free text; nothing ties them to the roster.
    """

    responsible: tuple[str, ...] = ()
    accountable: str = ""
    consulted: tuple[str, ...] = ()
    informed: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "responsible", _unique(self.responsible))
        object.__setattr__(self, "accountable", str(self.accountable or ""))
        object.__setattr__(self, "consulted", _unique(self.consulted))
        object.__setattr__(self, "informed", _unique(self.informed))

    def is_empty(self) -> bool:
        return not (self.responsible or self.accountable or self.consulted or self.informed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "responsible": list(self.responsible),
            "accountable": self.accountable,
            "consulted": list(self.consulted),
            "informed": list(self.informed),
        }

    @classmethod
    def from_dict(cls, raw: Any) -> RaciRoles:
        if not isinstance(raw, Mapping):
            return cls()

        def names(key: str) -> tuple[str, ...]:
            val = raw.get(key)
            if isinstance(val, str):
                return (val,) if val else ()
            if isinstance(val, list | tuple):
                return tuple(str(v) for v in val if v is not None)
            return ()

        accountable = raw.get("accountable")
        if isinstance(accountable, list | tuple):
            # Some generators answer with a one-element list.
            accountable = accountable[0] if accountable else ""

        return cls(
            responsible=names("responsible"),
            accountable=str(accountable or ""),
            consulted=names("consulted"),
            informed=names("informed"),
        )


@dataclass(frozen=True, slots=True)
class Active:
    status: TaskStatus

    def __post_init__(self) -> None:
        if self.status is TaskStatus.ARCHIVED:
            raise ValueError("Active lifecycle cannot carry ARCHIVED; use Archived(...)")


@dataclass(frozen=True, slots=True)
class Archived:
    # None when a task arrived already archived with no recorded prior state.
    prior: TaskStatus | None = None


Lifecycle = Active | Archived


def lifecycle_for(status: TaskStatus, prior: TaskStatus | None = None) -> Lifecycle:
    if status is TaskStatus.ARCHIVED:
        return Archived(prior=prior if prior in ACTIVE_STATUSES else None)
    return Active(status)


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str = ""
    lifecycle: Lifecycle = field(default_factory=lambda: Active(TaskStatus.TODO))
    roles: RaciRoles = field(default_factory=RaciRoles)
    due_date: str | None = None

    @property
    def status(self) -> TaskStatus:
        if isinstance(self.lifecycle, Archived):
            return TaskStatus.ARCHIVED
        return self.lifecycle.status

    @property
    def previous_status(self) -> TaskStatus | None:
        if isinstance(self.lifecycle, Archived):
            return self.lifecycle.prior
        return None

    @property
    def is_archived(self) -> bool:
        return isinstance(self.lifecycle, Archived)

    def with_status(self, new_status: TaskStatus) -> Task:
        """
        Status transition.

        Archiving records the current status as the prior one (re-archiving
        keeps the original prior status); any other target clears it.
        """
        if new_status is TaskStatus.ARCHIVED:
            if isinstance(self.lifecycle, Archived):
                return self
            return replace(self, lifecycle=Archived(prior=self.lifecycle.status))
        return replace(self, lifecycle=Active(new_status))

    def restored(self) -> Task:
        """Leave the archive, back to the prior status (TODO when none was recorded)."""
        if not isinstance(self.lifecycle, Archived):
            return self
        return self.with_status(self.lifecycle.prior or TaskStatus.TODO)

    @classmethod
    def new(
        cls,
        *,
        title: str,
        description: str = "",
        roles: RaciRoles | None = None,
        due_date: str | None = None,
        status: TaskStatus = TaskStatus.TODO,
    ) -> Task:
        return cls(
            id=new_task_id(),
            title=title,
            description=description,
            lifecycle=lifecycle_for(status),
            roles=roles or RaciRoles(),
            due_date=due_date or None,
        )

    # ---- wire format (storage / export / import) ----

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "roles": self.roles.to_dict(),
        }
        if self.previous_status is not None:
            out["previousStatus"] = self.previous_status.value
        if self.due_date:
            out["dueDate"] = self.due_date
        return out

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        status = TaskStatus.from_wire(raw.get("status"))
        prior_raw = raw.get("previousStatus")
        prior = TaskStatus.from_wire(prior_raw) if prior_raw else None

        due_date = raw.get("dueDate") or None
        if due_date is not None and not is_valid_due_date(str(due_date)):
            logger.warning("Dropping invalid dueDate=%r on task id=%r", due_date, raw.get("id"))
            due_date = None

        task_id = raw.get("id")
        return cls(
            id=str(task_id) if task_id not in (None, "") else new_task_id(),
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            lifecycle=lifecycle_for(status, prior),
            roles=RaciRoles.from_dict(raw.get("roles")),
            due_date=str(due_date) if due_date else None,
        )


@dataclass(frozen=True, slots=True)
class PlanSuggestion:
    """One task proposed by the plan generator."""

    title: str
    description: str
    roles: RaciRoles

    def to_task(self) -> Task:
        return Task.new(title=self.title, description=self.description, roles=self.roles)
