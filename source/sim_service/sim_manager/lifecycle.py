"""
Device lifecycle state machine.

Transitions are pure ``(state, event) -> state`` lookups; interactions check
them before calling any collaborator, and commit the result with a single
assignment on the device handle.
"""

from __future__ import annotations

from enum import Enum

from .errors import AlreadyBooted, BootInProgress, NotBooted, PreconditionFailed
from .models import LifecycleState


class LifecycleEvent(str, Enum):
    boot_requested = "boot_requested"
    boot_succeeded = "boot_succeeded"
    boot_failed = "boot_failed"
    shutdown_requested = "shutdown_requested"
    shutdown_succeeded = "shutdown_succeeded"


S = LifecycleState
E = LifecycleEvent

TRANSITIONS: dict[tuple[LifecycleState, LifecycleEvent], LifecycleState] = {
    (S.shut_down, E.boot_requested): S.booting,
    (S.unknown, E.boot_requested): S.booting,
    (S.booting, E.boot_succeeded): S.booted,
    (S.booting, E.boot_failed): S.shut_down,
    (S.booted, E.shutdown_requested): S.shutting_down,
    # retry after an incomplete shutdown
    (S.shutting_down, E.shutdown_requested): S.shutting_down,
    (S.shutting_down, E.shutdown_succeeded): S.shut_down,
}


def can_transition(state: LifecycleState, event: LifecycleEvent) -> bool:
    return (state, event) in TRANSITIONS


def transition(state: LifecycleState, event: LifecycleEvent) -> LifecycleState:
    """Return the state reached from ``state`` on ``event`` or raise."""
    nxt = TRANSITIONS.get((state, event))
    if nxt is not None:
        return nxt

    if event == E.boot_requested:
        if state == S.booted:
            raise AlreadyBooted("Simulator is already booted")
        if state == S.booting:
            raise BootInProgress("Simulator is already booting")
    if event == E.shutdown_requested:
        raise NotBooted(f"Simulator is not booted (state: {state.value})")
    raise PreconditionFailed(
        f"Cannot apply {event.value} while simulator is {state.value}"
    )


def require_booted(state: LifecycleState, action: str = "interaction") -> None:
    if state != S.booted:
        raise NotBooted(f"Cannot {action}: simulator is {state.value}, not booted")


def require_shut_down(state: LifecycleState, action: str = "interaction") -> None:
    if state != S.shut_down:
        raise PreconditionFailed(
            f"Cannot {action}: simulator is {state.value}, not shut down"
        )
