"""Shared pydantic base for every gpsim model."""

from typing import Any

from pydantic import BaseModel, ValidationError, model_validator

from gpsim.errors import InvalidConfig


def describe_errors(err: ValidationError) -> str:
    """Flatten a validation error into ``field: message`` pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in detail['loc']) or 'value'}: {detail['msg']}"
        for detail in err.errors()
    )


class GpsimModel(BaseModel):
    """Base model whose construction errors raise :class:`InvalidConfig`.

    Field constraints stay declared with ``Field(ge=..., le=...)``; only
    the error type changes. Subclasses override :meth:`_config_error` to
    raise a more specific error.
    """

    @model_validator(mode="wrap")
    @classmethod
    def _raise_config_error(cls, data: Any, handler):
        try:
            return handler(data)
        except ValidationError as err:
            raise cls._config_error(err) from err

    @classmethod
    def _config_error(cls, err: ValidationError) -> InvalidConfig:
        return InvalidConfig(f"Invalid {cls.__name__}: {describe_errors(err)}")
