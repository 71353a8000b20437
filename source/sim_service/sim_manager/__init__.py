"""Public API re-exports."""

from .models import (
    LifecycleState,
    LaunchConfiguration,
    LaunchOption,
    ProcessInfo,
    SimulatorApplication,
    SimProc,
)
from .errors import (
    InteractionError,
    PreconditionFailed,
    AlreadyBooted,
    BootInProgress,
    NotBooted,
    ProcessNotOwned,
    RecordingUnavailable,
    InvalidConfiguration,
    CollaboratorFailure,
    ShutdownIncomplete,
    DeviceBusy,
)
from .device import DeviceHandle
from .registry import ProcessRegistry, owned_by, scan_host, process_info_from_host
from .launch_args import compile_launch_args, simulator_app_args
from .collaborators import Collaborators
from .interaction import Interaction, Success, Failure, Outcome
from .pipeline import InteractionPipeline

__all__ = [
    "LifecycleState",
    "LaunchConfiguration",
    "LaunchOption",
    "ProcessInfo",
    "SimulatorApplication",
    "SimProc",
    "InteractionError",
    "PreconditionFailed",
    "AlreadyBooted",
    "BootInProgress",
    "NotBooted",
    "ProcessNotOwned",
    "RecordingUnavailable",
    "InvalidConfiguration",
    "CollaboratorFailure",
    "ShutdownIncomplete",
    "DeviceBusy",
    "DeviceHandle",
    "ProcessRegistry",
    "owned_by",
    "scan_host",
    "process_info_from_host",
    "compile_launch_args",
    "simulator_app_args",
    "Collaborators",
    "Interaction",
    "Success",
    "Failure",
    "Outcome",
    "InteractionPipeline",
]
