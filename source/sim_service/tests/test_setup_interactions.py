import os
import plistlib

import pytest

from sim_manager import setup_interactions as setup
from sim_manager.errors import InvalidConfiguration, PreconditionFailed
from sim_manager.models import (
    LaunchConfiguration,
    LifecycleState,
    SimulatorApplication,
)


def _read(device, parts):
    with open(os.path.join(device.data_dir, *parts), "rb") as f:
        return plistlib.load(f)


def _raw(device, parts):
    with open(os.path.join(device.data_dir, *parts), "rb") as f:
        return f.read()


def test_set_locale(device):
    setup.set_locale("fr_FR")(device)

    prefs = _read(device, setup.GLOBAL_PREFERENCES)
    assert prefs["AppleLocale"] == "fr_FR"
    assert prefs["AppleLanguages"] == ["fr"]


def test_set_locale_is_idempotent(device):
    setup.set_locale("en_US")(device)
    first = _raw(device, setup.GLOBAL_PREFERENCES)
    setup.set_locale("en_US")(device)

    assert _raw(device, setup.GLOBAL_PREFERENCES) == first


def test_set_locale_keeps_other_keys(device):
    path = os.path.join(device.data_dir, *setup.GLOBAL_PREFERENCES)
    setup.write_plist(path, {"AppleICUForce24HourTime": True})

    setup.set_locale("de_DE")(device)

    prefs = _read(device, setup.GLOBAL_PREFERENCES)
    assert prefs["AppleICUForce24HourTime"] is True
    assert prefs["AppleLocale"] == "de_DE"


def test_set_invalid_locale(device):
    with pytest.raises(InvalidConfiguration):
        setup.set_locale("xx-YY")(device)


@pytest.mark.parametrize(
    "state",
    [
        LifecycleState.booted,
        LifecycleState.booting,
        LifecycleState.shutting_down,
        LifecycleState.unknown,
    ],
)
def test_setup_requires_shut_down(device, state):
    device.state = state
    interactions = [
        setup.set_locale("en_US"),
        setup.authorize_location_settings(["com.example.app"]),
        setup.override_watchdog_timer(["com.example.app"], 30),
        setup.setup_keyboard(),
    ]
    for interaction in interactions:
        with pytest.raises(PreconditionFailed):
            interaction(device)
    assert not os.path.exists(device.data_dir)


def test_authorize_location_settings(device):
    setup.authorize_location_settings(["com.a", "com.b"])(device)

    clients = _read(device, setup.LOCATION_CLIENTS)
    assert set(clients) == {"com.a", "com.b"}
    assert clients["com.a"]["BundleId"] == "com.a"
    assert clients["com.a"]["Authorized"] is True


def test_authorize_location_settings_is_idempotent(device):
    setup.authorize_location_settings(["com.a"])(device)
    first = _raw(device, setup.LOCATION_CLIENTS)
    setup.authorize_location_settings(["com.a"])(device)
    assert _raw(device, setup.LOCATION_CLIENTS) == first


def test_authorize_location_settings_needs_bundle_ids(device):
    with pytest.raises(InvalidConfiguration) as exc:
        setup.authorize_location_settings([])(device)
    assert exc.value.field == "bundle_ids"


def test_authorize_location_for_application(device):
    app = SimulatorApplication(bundle_id="com.apple.mobilesafari", name="Safari")

    interaction = setup.authorize_location_settings_for_application(app)
    interaction(device)

    assert "com.apple.mobilesafari" in interaction.name
    assert "com.apple.mobilesafari" in _read(device, setup.LOCATION_CLIENTS)


def test_override_watchdog_timer_merges(device):
    setup.override_watchdog_timer(["com.a"], 30)(device)
    setup.override_watchdog_timer(["com.b"], 60)(device)
    setup.override_watchdog_timer(["com.b"], 60)(device)

    prefs = _read(device, setup.SPRINGBOARD_PREFERENCES)
    assert prefs[setup.WATCHDOG_EXCEPTIONS_KEY] == {"com.a": 30.0, "com.b": 60.0}


def test_override_watchdog_timer_rejects_bad_timeout(device):
    with pytest.raises(InvalidConfiguration) as exc:
        setup.override_watchdog_timer(["com.a"], 0)(device)
    assert exc.value.field == "timeout"


def test_setup_keyboard(device):
    setup.setup_keyboard()(device)
    first = _raw(device, setup.KEYBOARD_PREFERENCES)
    setup.setup_keyboard()(device)

    prefs = _read(device, setup.KEYBOARD_PREFERENCES)
    assert prefs["KeyboardCapsLock"] is False
    assert prefs["KeyboardAutocapitalization"] is False
    assert prefs["KeyboardAutocorrection"] is False
    assert _raw(device, setup.KEYBOARD_PREFERENCES) == first


def test_prepare_for_launch_order(device):
    steps = setup.prepare_for_launch(LaunchConfiguration(locale="ja_JP"))

    assert [s.name for s in steps] == ["set_locale ja_JP", "setup_keyboard"]
    for step in steps:
        step(device)
    assert _read(device, setup.GLOBAL_PREFERENCES)["AppleLocale"] == "ja_JP"


def test_prepare_for_launch_skips_unset_locale(device):
    steps = setup.prepare_for_launch(LaunchConfiguration(scale=0.5))
    assert [s.name for s in steps] == ["setup_keyboard"]


def test_read_plist_missing_file(tmp_path):
    assert setup.read_plist(str(tmp_path / "missing.plist")) == {}
