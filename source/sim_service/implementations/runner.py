from __future__ import annotations

import threading
from typing import Callable

from sim_manager.errors import DeviceBusy
from sim_manager.interaction import Outcome
from sim_manager.pipeline import InteractionPipeline


class PipelineRunner:
    """
    Serializes pipelines per device: at most one pipeline runs against a
    given device id at any time. A second one is refused, not queued.
    """

    def __init__(self, node_name: str) -> None:
        self.node_name = node_name
        self._busy: set[str] = set()
        self._guard = threading.Lock()

    def _claim(self, device_id: str) -> None:
        with self._guard:
            if device_id in self._busy:
                raise DeviceBusy(f"A pipeline is already running on {device_id}")
            self._busy.add(device_id)

    def _release(self, device_id: str) -> None:
        with self._guard:
            self._busy.discard(device_id)

    def busy(self, device_id: str) -> bool:
        with self._guard:
            return device_id in self._busy

    def run(self, pipeline: InteractionPipeline) -> Outcome:
        # This is blocking
        device_id = pipeline.device.id
        self._claim(device_id)
        try:
            return pipeline.run()
        finally:
            self._release(device_id)

    def start(
        self,
        pipeline: InteractionPipeline,
        on_done: Callable[[Outcome], None] | None = None,
    ) -> threading.Thread:
        device_id = pipeline.device.id
        self._claim(device_id)

        def _run():
            try:
                outcome = pipeline.run()
            finally:
                self._release(device_id)
            if on_done is not None:
                on_done(outcome)

        t = threading.Thread(target=_run, daemon=True)
        t.start()
        return t
