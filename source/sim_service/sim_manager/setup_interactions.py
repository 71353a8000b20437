"""
Interactions that rewrite a device's preference files before it boots.

Every one of them requires the device to be shut down and merges its keys
into the existing plist, so applying one twice leaves the same file as
applying it once.
"""

from __future__ import annotations

import os
import plistlib
from typing import TYPE_CHECKING, Any, Iterable

from .errors import InvalidConfiguration
from .interaction import Interaction
from .launch_args import languages_for_locale
from .lifecycle import require_shut_down
from .models import LaunchConfiguration, SimulatorApplication

if TYPE_CHECKING:
    from .device import DeviceHandle


GLOBAL_PREFERENCES = ("Library", "Preferences", ".GlobalPreferences.plist")
LOCATION_CLIENTS = ("Library", "Caches", "locationd", "clients.plist")
SPRINGBOARD_PREFERENCES = ("Library", "Preferences", "com.apple.springboard.plist")
KEYBOARD_PREFERENCES = ("Library", "Preferences", "com.apple.Preferences.plist")

WATCHDOG_EXCEPTIONS_KEY = "FBLaunchWatchdogExceptions"

KEYBOARD_SETTINGS = {
    "KeyboardCapsLock": False,
    "KeyboardAutocapitalization": False,
    "KeyboardAutocorrection": False,
    "KeyboardPrediction": False,
}


def _plist_path(device: "DeviceHandle", parts: tuple[str, ...]) -> str:
    return os.path.join(device.data_dir or "", *parts)


def read_plist(path: str) -> dict[str, Any]:
    if not os.path.exists(path):
        return {}
    with open(path, "rb") as f:
        data = plistlib.load(f)
    return data if isinstance(data, dict) else {}


def write_plist(path: str, data: dict[str, Any]) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    tmp = path + ".tmp"
    with open(tmp, "wb") as f:
        plistlib.dump(data, f, sort_keys=True)
    os.replace(tmp, path)


def merge_plist(path: str, updates: dict[str, Any]) -> dict[str, Any]:
    data = read_plist(path)
    data.update(updates)
    write_plist(path, data)
    return data


def _bundle_ids(ids: list[str]) -> list[str]:
    if not ids or any(not b for b in ids):
        raise InvalidConfiguration("bundle_ids", "at least one non-empty bundle id is required")
    return ids


# ---- Interactions ----
def set_locale(locale: str) -> Interaction:
    def _set_locale(device: "DeviceHandle") -> None:
        require_shut_down(device.state, "set the locale")
        languages = languages_for_locale(locale)
        print(f"Setting locale {locale} on {device.id}")
        merge_plist(
            _plist_path(device, GLOBAL_PREFERENCES),
            {"AppleLocale": locale, "AppleLanguages": languages},
        )

    return Interaction(f"set_locale {locale}", _set_locale)


def authorize_location_settings(bundle_ids: Iterable[str]) -> Interaction:
    ids = list(bundle_ids)

    def _authorize(device: "DeviceHandle") -> None:
        require_shut_down(device.state, "authorize location settings")
        checked = _bundle_ids(ids)
        updates = {
            bundle_id: {
                "Whitelisted": False,
                "BundleId": bundle_id,
                "SupportedAuthorizationMask": 3,
                "Authorization": 2,
                "Authorized": True,
                "Executable": "",
                "Registered": "",
            }
            for bundle_id in checked
        }
        print(f"Authorizing location for {checked} on {device.id}")
        merge_plist(_plist_path(device, LOCATION_CLIENTS), updates)

    return Interaction("authorize_location_settings", _authorize)


def authorize_location_settings_for_application(
    application: SimulatorApplication,
) -> Interaction:
    inner = authorize_location_settings([application.bundle_id])
    return Interaction(f"authorize_location_settings {application.bundle_id}", inner.perform)


def override_watchdog_timer(bundle_ids: Iterable[str], timeout: float) -> Interaction:
    """
    Give applications longer than SpringBoard's default 20 seconds to start
    before they are killed.
    """
    ids = list(bundle_ids)

    def _override(device: "DeviceHandle") -> None:
        require_shut_down(device.state, "override the watchdog timer")
        checked = _bundle_ids(ids)
        if timeout <= 0:
            raise InvalidConfiguration("timeout", f"must be positive, got {timeout!r}")

        path = _plist_path(device, SPRINGBOARD_PREFERENCES)
        exceptions = dict(read_plist(path).get(WATCHDOG_EXCEPTIONS_KEY) or {})
        exceptions.update({bundle_id: float(timeout) for bundle_id in checked})
        merge_plist(path, {WATCHDOG_EXCEPTIONS_KEY: exceptions})

    return Interaction("override_watchdog_timer", _override)


def setup_keyboard() -> Interaction:
    def _setup_keyboard(device: "DeviceHandle") -> None:
        require_shut_down(device.state, "set up the keyboard")
        merge_plist(_plist_path(device, KEYBOARD_PREFERENCES), dict(KEYBOARD_SETTINGS))

    return Interaction("setup_keyboard", _setup_keyboard)


def prepare_for_launch(configuration: LaunchConfiguration) -> list[Interaction]:
    """Set the locale (when configured), then set up the keyboard."""
    steps: list[Interaction] = []
    if configuration.locale is not None:
        steps.append(set_locale(configuration.locale))
    steps.append(setup_keyboard())
    return steps
