import threading

import pytest

from implementations.runner import PipelineRunner
from sim_manager.errors import DeviceBusy
from sim_manager.interaction import Interaction
from sim_manager.models import LifecycleState
from sim_manager.pipeline import InteractionPipeline


def _blocking_pipeline(device, collaborators, started, release):
    def _wait(d):
        started.set()
        release.wait(timeout=2.0)

    return InteractionPipeline(device, collaborators).append(Interaction("wait", _wait))


def test_run_returns_outcome(device, collaborators):
    runner = PipelineRunner("test-node")

    outcome = runner.run(InteractionPipeline(device, collaborators).boot())

    assert outcome.ok
    assert device.state == LifecycleState.booted
    assert not runner.busy(device.id)


def test_second_pipeline_on_same_device_is_refused(device, collaborators):
    runner = PipelineRunner("test-node")
    started, release = threading.Event(), threading.Event()

    thread = runner.start(_blocking_pipeline(device, collaborators, started, release))
    assert started.wait(timeout=2.0)

    try:
        assert runner.busy(device.id)
        with pytest.raises(DeviceBusy):
            runner.run(InteractionPipeline(device, collaborators).boot())
        with pytest.raises(DeviceBusy):
            runner.start(InteractionPipeline(device, collaborators).boot())
    finally:
        release.set()
        thread.join(timeout=2.0)

    assert not runner.busy(device.id)
    assert device.state == LifecycleState.shut_down


def test_other_devices_are_not_blocked(device, collaborators):
    from sim_manager.device import DeviceHandle

    runner = PipelineRunner("test-node")
    started, release = threading.Event(), threading.Event()
    thread = runner.start(_blocking_pipeline(device, collaborators, started, release))
    assert started.wait(timeout=2.0)

    other = DeviceHandle(
        id="SIM-2", state=LifecycleState.shut_down, data_dir=device.data_dir
    )
    try:
        assert runner.run(InteractionPipeline(other, collaborators).boot()).ok
    finally:
        release.set()
        thread.join(timeout=2.0)


def test_start_calls_on_done(device, collaborators):
    runner = PipelineRunner("test-node")
    outcomes = []

    thread = runner.start(
        InteractionPipeline(device, collaborators).shutdown(), on_done=outcomes.append
    )
    thread.join(timeout=2.0)

    assert len(outcomes) == 1
    assert not outcomes[0].ok
    assert outcomes[0].index == 0


def test_finished_pipelines_leave_no_bookkeeping(device, collaborators):
    runner = PipelineRunner("test-node")

    runner.run(InteractionPipeline(device, collaborators).boot())
    runner.start(InteractionPipeline(device, collaborators).shutdown()).join(2.0)

    assert runner._busy == set()
