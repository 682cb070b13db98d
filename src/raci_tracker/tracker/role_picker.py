# src/raci_tracker/tracker/role_picker.py

"""
Role picker: a dropdown over roster names, in single or multi mode.

The mode lives in the Selection object, not in flags on the picker:
- SingleSelection: one name or ""; choosing an option replaces the value
  and closes the picker.
- MultiSelection: ordered names; choosing an option toggles it and the
  picker stays open.

Dismissing (an interaction outside the picker) closes it and leaves the
value alone.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Protocol

from .models import RaciRoles


class Selection(Protocol):
    closes_on_select: bool

    @property
    def value(self) -> str | tuple[str, ...]: ...

    def select(self, option: str) -> None: ...
    def remove(self, name: str) -> None: ...
    def is_selected(self, option: str) -> bool: ...
    def is_empty(self) -> bool: ...
    def summary(self) -> str: ...


class SingleSelection:
    closes_on_select = True

    def __init__(self, value: str = "") -> None:
        self._value = value or ""

    @property
    def value(self) -> str:
        return self._value

    def select(self, option: str) -> None:
        self._value = option

    def remove(self, name: str) -> None:
        if self._value == name:
            self._value = ""

    def is_selected(self, option: str) -> bool:
        return self._value == option

    def is_empty(self) -> bool:
        return not self._value

    def summary(self) -> str:
        return self._value


class MultiSelection:
    closes_on_select = False

    def __init__(self, value: Iterable[str] = ()) -> None:
        self._value: list[str] = []
        for v in value:
            if v not in self._value:
                self._value.append(v)

    @property
    def value(self) -> tuple[str, ...]:
        return tuple(self._value)

    def select(self, option: str) -> None:
        if option in self._value:
            self._value.remove(option)
        else:
            self._value.append(option)

    def remove(self, name: str) -> None:
        if name in self._value:
            self._value.remove(name)

    def is_selected(self, option: str) -> bool:
        return option in self._value

    def is_empty(self) -> bool:
        return not self._value

    def summary(self) -> str:
        return ", ".join(f"[{v}]" for v in self._value)


class RolePicker:
    def __init__(
        self,
        selection: Selection,
        options: Sequence[str],
        *,
        placeholder: str = "Select...",
        on_change: Callable[[str | tuple[str, ...]], None] | None = None,
    ) -> None:
        self.selection = selection
        self.options = list(options)
        self.placeholder = placeholder
        self._on_change = on_change
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def value(self) -> str | tuple[str, ...]:
        return self.selection.value

    def open(self) -> None:
        self._open = True

    def toggle_open(self) -> None:
        self._open = not self._open

    def dismiss(self) -> None:
        self._open = False

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.selection.value)

    def select(self, option: str) -> None:
        self.selection.select(option)
        self._changed()
        if self.selection.closes_on_select:
            self._open = False

    def remove(self, name: str) -> None:
        self.selection.remove(name)
        self._changed()

    def is_selected(self, option: str) -> bool:
        return self.selection.is_selected(option)

    def render(self) -> list[str]:
        trigger = self.placeholder if self.selection.is_empty() else self.selection.summary()
        lines = [f"{trigger} {'^' if self._open else 'v'}"]
        if not self._open:
            return lines
        if not self.options:
            lines.append("  No people in roster.")
            return lines
        for opt in self.options:
            mark = "*" if self.is_selected(opt) else " "
            lines.append(f"  ({mark}) {opt}")
        return lines


@dataclass(frozen=True, slots=True)
class RoleField:
    letter: str
    attr: str
    label: str
    multiple: bool

    def selection_for(self, roles: RaciRoles) -> Selection:
        current = getattr(roles, self.attr)
        if self.multiple:
            return MultiSelection(current)
        return SingleSelection(current)

    def apply(self, roles: RaciRoles, value: str | tuple[str, ...]) -> RaciRoles:
        return replace(roles, **{self.attr: value})


ROLE_FIELDS: dict[str, RoleField] = {
    "R": RoleField("R", "responsible", "Responsible", multiple=True),
    "A": RoleField("A", "accountable", "Accountable", multiple=False),
    "C": RoleField("C", "consulted", "Consulted", multiple=True),
    "I": RoleField("I", "informed", "Informed", multiple=True),
}


def role_field(letter: str) -> RoleField:
    try:
        return ROLE_FIELDS[letter.strip().upper()[:1]]
    except (KeyError, AttributeError):
        raise ValueError(f"Unknown RACI role: {letter!r} (use R, A, C or I)") from None


def picker_for(roles: RaciRoles, letter: str, options: Sequence[str]) -> RolePicker:
    """Build a picker pre-filled with the task's current value for one role."""
    rf = role_field(letter)
    return RolePicker(rf.selection_for(roles), options, placeholder=f"Select {rf.label}...")
