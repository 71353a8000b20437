"""
Fail-fast interaction pipeline.

Interactions are appended as values and executed in order by ``run()``.
The first failure stops the run; work already done (a completed boot, a
delivered signal) is not undone, the outcome only reports where and why
execution stopped.
"""

from __future__ import annotations

from typing import Iterable, Protocol

import settings

from . import lifecycle_interactions as lifecycle
from . import setup_interactions as setup
from .collaborators import Collaborators
from .device import DeviceHandle
from .errors import CollaboratorFailure, InteractionError
from .interaction import Failure, Interaction, Outcome, Success
from .models import LaunchConfiguration, ProcessInfo, SimulatorApplication


class DeviceStore(Protocol):
    def put(self, device: DeviceHandle) -> None: ...


class InteractionPipeline:
    def __init__(
        self,
        device: DeviceHandle,
        collaborators: Collaborators | None = None,
        store: DeviceStore | None = None,
    ) -> None:
        self.device = device
        self.collaborators = collaborators or Collaborators()
        self.store = store
        self._interactions: list[Interaction] = []
        self.outcome: Outcome | None = None

    @property
    def interactions(self) -> list[Interaction]:
        return list(self._interactions)

    def __len__(self) -> int:
        return len(self._interactions)

    def append(self, interaction: Interaction) -> "InteractionPipeline":
        self._interactions.append(interaction)
        return self

    def extend(self, interactions: Iterable[Interaction]) -> "InteractionPipeline":
        for interaction in interactions:
            self.append(interaction)
        return self

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.put(self.device)
        except Exception as e:
            print("Error persisting simulator", self.device.id, e)

    def run(self) -> Outcome:
        print(f"Running {len(self._interactions)} interactions on {self.device.id}")
        for index, interaction in enumerate(self._interactions):
            print(f"[{index}] {interaction.name}")
            try:
                interaction.perform(self.device)
            except InteractionError as e:
                return self._fail(index, interaction, e)
            except Exception as e:  # pylint: disable=broad-except
                return self._fail(index, interaction, CollaboratorFailure(e))
            self._persist()

        self.outcome = Success(count=len(self._interactions))
        return self.outcome

    def _fail(
        self, index: int, interaction: Interaction, cause: InteractionError
    ) -> Failure:
        failure = Failure(index=index, name=interaction.name, cause=cause)
        print(failure)
        self.device.error_reason = str(cause)
        self._persist()
        self.outcome = failure
        return failure

    # ---- Lifecycle ----
    def boot(
        self, configuration: LaunchConfiguration | None = None
    ) -> "InteractionPipeline":
        c = self.collaborators
        return self.append(
            lifecycle.boot(
                c.provisioner,
                configuration,
                c.recorder_factory,
                settings.SIM_DEVICE_SET_PATH or None,
            )
        )

    def shutdown(self) -> "InteractionPipeline":
        return self.append(lifecycle.shutdown(self.collaborators.provisioner))

    def open_url(self, url: str) -> "InteractionPipeline":
        return self.append(lifecycle.open_url(self.collaborators.url_opener, url))

    def signal(self, signo: int, process: ProcessInfo) -> "InteractionPipeline":
        return self.append(
            lifecycle.signal(self.collaborators.signaller, signo, process)
        )

    def kill_process(self, process: ProcessInfo) -> "InteractionPipeline":
        return self.append(lifecycle.kill_process(self.collaborators.signaller, process))

    def start_recording_video(self) -> "InteractionPipeline":
        return self.append(lifecycle.start_recording_video())

    def stop_recording_video(self) -> "InteractionPipeline":
        return self.append(lifecycle.stop_recording_video())

    # ---- Setup ----
    def prepare_for_launch(
        self, configuration: LaunchConfiguration
    ) -> "InteractionPipeline":
        return self.extend(setup.prepare_for_launch(configuration))

    def set_locale(self, locale: str) -> "InteractionPipeline":
        return self.append(setup.set_locale(locale))

    def authorize_location_settings(
        self, bundle_ids: Iterable[str]
    ) -> "InteractionPipeline":
        return self.append(setup.authorize_location_settings(bundle_ids))

    def authorize_location_settings_for_application(
        self, application: SimulatorApplication
    ) -> "InteractionPipeline":
        return self.append(
            setup.authorize_location_settings_for_application(application)
        )

    def override_watchdog_timer(
        self, bundle_ids: Iterable[str], timeout: float
    ) -> "InteractionPipeline":
        return self.append(setup.override_watchdog_timer(bundle_ids, timeout))

    def setup_keyboard(self) -> "InteractionPipeline":
        return self.append(setup.setup_keyboard())
