"""${ENV_VAR} and ${ENV_VAR:-default} substitution over raw YAML data."""

import os
import re
from collections.abc import Mapping

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def collect_missing_vars(
    data: RawValue, environ: Mapping[str, str] = os.environ
) -> list[str]:
    """Return every referenced variable that is unset and has no default.

    Names are reported once each, in first-seen order.
    """
    missing: list[str] = []
    for text in _strings(data):
        for match in _ENV_VAR_PATTERN.finditer(text):
            name, default = match.group(1), match.group(2)
            if name not in environ and default is None and name not in missing:
                missing.append(name)
    return missing


def interpolate(data: RawValue, environ: Mapping[str, str] = os.environ) -> RawValue:
    """Return a copy of data with every reference substituted.

    Call collect_missing_vars first; an unset variable without a default
    raises KeyError here.
    """

    def _substitute(match: re.Match[str]) -> str:
        name, default = match.group(1), match.group(2)
        if name in environ:
            return environ[name]
        if default is not None:
            return default
        raise KeyError(name)

    if isinstance(data, str):
        return _ENV_VAR_PATTERN.sub(_substitute, data)
    if isinstance(data, list):
        return [interpolate(item, environ) for item in data]
    if isinstance(data, dict):
        return {key: interpolate(value, environ) for key, value in data.items()}
    return data


def _strings(data: RawValue) -> list[str]:
    if isinstance(data, str):
        return [data]
    if isinstance(data, list):
        return [text for item in data for text in _strings(item)]
    if isinstance(data, dict):
        return [text for value in data.values() for text in _strings(value)]
    return []
