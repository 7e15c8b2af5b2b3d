"""Explicit optional-field updates.

A patch field is either ``UNCHANGED`` or ``SetTo(value)``. ``SetTo(None)``
clears a nullable column, which a plain ``None`` default could not express.
"""

from dataclasses import dataclass, fields
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class Unchanged:
    """Marker for a field the caller did not set."""

    _instance: "Unchanged | None" = None

    def __new__(cls) -> "Unchanged":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNCHANGED"

    def __bool__(self) -> bool:
        return False


UNCHANGED = Unchanged()


@dataclass(frozen=True)
class SetTo(Generic[T]):
    """Replace the field with ``value``."""

    value: T


Field = Union[Unchanged, SetTo[T]]


def changed_fields(patch: Any) -> dict[str, Any]:
    """Return ``{name: value}`` for every field of a patch dataclass set with ``SetTo``."""
    return {f.name: getattr(patch, f.name).value for f in fields(patch) if isinstance(getattr(patch, f.name), SetTo)}


def apply_patch(target: Any, patch: Any) -> dict[str, Any]:
    """Copy the set fields of ``patch`` onto ``target``. Returns what was applied."""
    changes = changed_fields(patch)
    for name, value in changes.items():
        setattr(target, name, value)
    return changes
