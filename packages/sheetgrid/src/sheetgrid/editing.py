"""Interaction state of a grid and of a single edit session.

A grid is in exactly one of :class:`Idle`, :class:`Selecting` or
:class:`Editing`, so "selecting while editing" or two edited cells cannot be
expressed. The edit session held by the edited cell records why the session
ended (:class:`SessionPhase`).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Union

from sheetgrid.coords import Coordinate


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Selecting:
    """Pointer is down; pointer-over extends the range."""


@dataclass(frozen=True)
class Editing:
    """One cell is in edit mode.

    ``clearing``: the edit started from a typed character and the buffer
    starts empty. ``forced``: the edit was entered explicitly (Enter,
    double-click, clicking the edited cell again); arrow keys then move the
    editor cursor instead of committing.
    """

    at: Coordinate
    clearing: bool = False
    forced: bool = False


InteractionState = Union[Idle, Selecting, Editing]

IDLE = Idle()
SELECTING = Selecting()


def editing_at(state: InteractionState) -> Coordinate | None:
    return state.at if isinstance(state, Editing) else None


class SessionPhase(enum.Enum):
    OPEN = "open"
    COMMITTING = "committing"
    REVERTING = "reverting"


@dataclass
class EditSession:
    """Uncommitted buffer of the edited cell."""

    at: Coordinate
    buffer: Any
    phase: SessionPhase = SessionPhase.OPEN

    def change(self, value: Any) -> None:
        self.buffer = value
        self.phase = SessionPhase.OPEN

    def needs_flush(self, original: Any) -> bool:
        """Whether ending the session without commit or revert must notify."""
        return self.phase is SessionPhase.OPEN and self.buffer != original
