"""
Configuration for a generation run.

Built from the parsed plugin parameters, providing defaults and
validation for the template engine settings.
"""

from dataclasses import dataclass, field
from typing import List

from ..errors import ConfigError
from ..params import Params

DEFAULT_LEFT_DELIMITER = "(*"
DEFAULT_RIGHT_DELIMITER = "*)"
DEFAULT_URL_TIMEOUT = 30


@dataclass
class PluginConfig:
    """Settings consumed by the template engine."""

    # Template sources and entry points
    templates: List[str] = field(default_factory=list)
    entry_points: List[str] = field(default_factory=list)

    # Delimiters
    left: str = DEFAULT_LEFT_DELIMITER
    right: str = DEFAULT_RIGHT_DELIMITER

    # Behaviour
    strict: bool = False
    debug: bool = False
    timeout: int = DEFAULT_URL_TIMEOUT

    @property
    def block_start(self) -> str:
        return self.left + "%"

    @property
    def block_end(self) -> str:
        return "%" + self.right

    @property
    def comment_start(self) -> str:
        return self.left + "#"

    @property
    def comment_end(self) -> str:
        return "#" + self.right

    @classmethod
    def from_params(cls, params: Params) -> "PluginConfig":
        """
        Build configuration from plugin parameters.

        Args:
            params: Parsed parameter set

        Returns:
            Validated configuration

        Raises:
            ConfigError: If the configuration is unusable
        """
        templates = [t for t in params.get("template", []) if t]
        entry_points = [t for t in params.get("exec", []) if t] or list(templates)

        config = cls(
            templates=templates,
            entry_points=entry_points,
            left=params.get_str("left") or DEFAULT_LEFT_DELIMITER,
            right=params.get_str("right") or DEFAULT_RIGHT_DELIMITER,
            strict=params.get_bool("strict", False),
            debug=params.get_bool("debug", False),
            timeout=params.get_int("timeout", DEFAULT_URL_TIMEOUT),
        )

        warnings = config.validate()
        if warnings:
            raise ConfigError("; ".join(warnings))
        return config

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty when valid)
        """
        errors = []

        if not self.templates:
            errors.append("no templates given (use template=<path>)")

        if self.left == self.right:
            errors.append(f"left and right delimiters must differ: {self.left!r}")

        if self.timeout <= 0:
            errors.append(f"invalid timeout: {self.timeout}")

        return errors

