"""
protoc-gen-txt

A protoc plugin that renders Jinja2 templates against the descriptors of a
compiler request.
"""

from .errors import (
    ConfigError,
    InputError,
    ParameterError,
    PluginError,
    TemplateError,
    TemplateExecutionError,
    TemplateLoadError,
)
from .params import Params, parse_parameters

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "InputError",
    "ParameterError",
    "Params",
    "PluginError",
    "TemplateError",
    "TemplateExecutionError",
    "TemplateLoadError",
    "parse_parameters",
]
