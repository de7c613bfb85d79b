"""
Loads action inputs from the environment, applies CLI overrides, and validates them.
"""

import logging
import os
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from sta_actions.exceptions import ConfigurationError

log = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", bound=BaseModel)


def input_env_name(name: str) -> str:
    """Returns the environment variable GitHub Actions uses for an input."""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, environ: Mapping[str, str] | None = None) -> str:
    """Reads one input, stripped, or '' when it is not set."""
    environ = os.environ if environ is None else environ
    return environ.get(input_env_name(name), "").strip()


class InputManager:
    """Builds validated config models from action inputs."""

    def __init__(self, environ: Mapping[str, str] | None = None):
        self.environ = os.environ if environ is None else environ

    def read_inputs(self, model: type[BaseModel]) -> dict[str, Any]:
        """Returns the non-empty inputs for every field of `model`."""
        values = {}
        for key in model.model_fields:
            value = get_input(key, self.environ)
            if value:
                values[key] = value
        return values

    def load_config(
        self, model: type[ConfigT], cli_options: dict[str, Any] | None = None
    ) -> ConfigT:
        """
        Loads inputs from the environment, applies CLI overrides, and validates them.

        Args:
            model: The config model to build.
            cli_options: Options provided via the command line; None values are ignored.

        Raises:
            ConfigurationError: If validation fails.
        """
        values = self.read_inputs(model)
        if cli_options:
            values.update({k: v for k, v in cli_options.items() if v is not None})

        log.debug(f"Loading {model.__name__} with inputs: {sorted(values)}")
        try:
            return model(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Input validation failed:\n{e}") from e
