from __future__ import annotations


class InteractionError(Exception):
    """Base for every failure an interaction can report."""


class PreconditionFailed(InteractionError):
    """The device is in the wrong lifecycle state for the interaction."""


class AlreadyBooted(PreconditionFailed):
    pass


class BootInProgress(PreconditionFailed):
    pass


class NotBooted(PreconditionFailed):
    pass


class ProcessNotOwned(InteractionError):
    def __init__(self, pid: int, device_id: str, owner: str | None = None) -> None:
        self.pid = pid
        self.device_id = device_id
        self.owner = owner
        super().__init__(
            f"Process {pid} was launched by {owner or 'an unknown device'}, "
            f"not by {device_id}"
        )


class RecordingUnavailable(InteractionError):
    pass


class InvalidConfiguration(InteractionError):
    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class CollaboratorFailure(InteractionError):
    """Wraps an exception raised by an external collaborator."""

    def __init__(self, cause: BaseException, message: str | None = None) -> None:
        self.cause = cause
        super().__init__(message or f"{type(cause).__name__}: {cause}")


class ShutdownIncomplete(CollaboratorFailure):
    """
    Terminating the device failed; the device is left in shutting_down and
    must be retried or treated as unusable.
    """


class DeviceBusy(Exception):
    """A pipeline is already running against this device."""
