import re

from .errors import InvalidConfiguration
from .models import LaunchConfiguration, LaunchOption

# ll, ll_CC, ll_Script_CC (CC may also be a UN M.49 region code)
_LOCALE_RE = re.compile(r"^[a-z]{2,3}(_[A-Z][a-z]{3})?(_(?:[A-Z]{2}|\d{3}))?$")

ALLOWED_SCALES = (0.25, 0.5, 0.75, 1.0)


def _check_locale(locale: str) -> None:
    if not isinstance(locale, str) or not _LOCALE_RE.match(locale):
        raise InvalidConfiguration("locale", f"malformed locale identifier {locale!r}")


def _check_scale(scale: float) -> None:
    if float(scale) not in ALLOWED_SCALES:
        raise InvalidConfiguration(
            "scale", f"{scale!r} is not one of {', '.join(map(str, ALLOWED_SCALES))}"
        )


def _check_environment(environment: dict[str, str]) -> None:
    for key in environment:
        if not key or "=" in key:
            raise InvalidConfiguration(
                "environment", f"invalid environment variable name {key!r}"
            )


def validate_launch_configuration(config: LaunchConfiguration) -> None:
    if config.locale is not None:
        _check_locale(config.locale)
    if config.scale is not None:
        _check_scale(config.scale)
    _check_environment(config.environment)


def compile_launch_args(config: LaunchConfiguration) -> list[str]:
    """
    Compile a launch configuration into simulator host arguments.

    Pure: the same configuration always yields the same list, and an empty
    configuration yields an empty list.
    """
    validate_launch_configuration(config)

    args: list[str] = []
    if config.locale is not None:
        args += ["-AppleLocale", config.locale]
    if config.scale is not None:
        args += ["-SimulatorWindowLastScale", str(float(config.scale))]
    for key, value in config.environment.items():
        args += ["-setenv", f"{key}={value}"]
    if config.has(LaunchOption.disconnect_hardware_keyboard):
        args += ["-ConnectHardwareKeyboard", "0"]
    return args


def simulator_app_args(
    config: LaunchConfiguration,
    device_id: str,
    device_set_path: str | None = None,
) -> list[str]:
    """Full argument list for the simulator host application of one device."""
    args: list[str] = ["-CurrentDeviceUDID", device_id]
    if device_set_path:
        args += ["-DeviceSetPath", device_set_path]
    args += compile_launch_args(config)
    return args


def languages_for_locale(locale: str) -> list[str]:
    """AppleLanguages value for a locale: ``en_US`` -> ``["en"]``."""
    _check_locale(locale)
    parts = locale.split("_")
    language = parts[0]
    if len(parts) > 1 and len(parts[1]) == 4:
        language = f"{language}-{parts[1]}"
    return [language]
