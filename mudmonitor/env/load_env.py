import os
from typing import Dict, Mapping, TypeVar, Union

from dotenv import dotenv_values
from pydantic import BaseModel, ValidationError

from mudmonitor.errors import MonitorConfigError

from .env import Env

T = TypeVar("T", bound=BaseModel)

PrimaryType = Union[str, int, bool, float, bytes]


def _convert(
    envars: Mapping,
    source: Mapping[str, str | None],
) -> Dict[str, PrimaryType]:
    values: Dict[str, PrimaryType] = {}

    for envar_name, envar_value in source.items():
        envar_type = envars.get(envar_name)
        if envar_type is None or envar_value is None or envar_value == "":
            continue

        try:
            values[envar_name] = envar_type(envar_value)

        except ValueError as err:
            raise MonitorConfigError(
                f"Invalid value {envar_value!r} for {envar_name}: {err}"
            ) from err

    return values


def load_env(
    default: type[Env] = Env,
    env_file: str | None = None,
    override: T | None = None,
    environ: Mapping[str, str] | None = None,
) -> T:
    """
    Build an Env from the process environment, then an optional dotenv
    file, then an explicit override model, in increasing precedence.

    Only names declared in ``Env.types_map()`` are read. Any value that
    fails conversion or validation raises MonitorConfigError.
    """
    envars = default.types_map()

    if environ is None:
        environ = os.environ

    if env_file is None:
        env_file = ".env"

    values = _convert(
        envars,
        {envar_name: environ.get(envar_name) for envar_name in envars},
    )

    if env_file and os.path.exists(env_file):
        values.update(
            _convert(
                envars,
                dotenv_values(dotenv_path=env_file),
            )
        )

    if override:
        values.update(**override.model_dump(exclude_none=True))
        default = type(override)

    try:
        return default(
            **{name: value for name, value in values.items() if value is not None}
        )

    except ValidationError as err:
        raise MonitorConfigError(str(err)) from err
