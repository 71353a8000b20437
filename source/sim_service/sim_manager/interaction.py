from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

from .errors import InteractionError

if TYPE_CHECKING:
    from .device import DeviceHandle


@dataclass(frozen=True)
class Interaction:
    """
    A named unit of work against a device.

    ``perform`` raises an ``InteractionError`` to report failure and keeps
    no reference to the device once it returns.
    """

    name: str
    perform: Callable[["DeviceHandle"], None]

    def __call__(self, device: "DeviceHandle") -> None:
        self.perform(device)


@dataclass(frozen=True)
class Success:
    count: int = 0

    @property
    def ok(self) -> bool:
        return True

    def raise_for_failure(self) -> None:
        return None


@dataclass(frozen=True)
class Failure:
    index: int
    name: str
    cause: InteractionError

    @property
    def ok(self) -> bool:
        return False

    def raise_for_failure(self) -> None:
        raise self.cause

    def __str__(self) -> str:
        return f"Interaction #{self.index} ({self.name}) failed: {self.cause}"


Outcome = Union[Success, Failure]
