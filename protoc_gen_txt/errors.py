"""Exception types raised while generating output."""


class PluginError(Exception):
    """Base exception for failures that abort a generation run."""

    pass


class ParameterError(PluginError):
    """Raised when the parameter string cannot be parsed."""

    pass


class ConfigError(PluginError):
    """Raised for invalid or incomplete plugin configuration."""

    pass


class TemplateError(PluginError):
    """Base exception for template-related errors."""

    pass


class TemplateLoadError(TemplateError):
    """Raised when a template source cannot be read or parsed."""

    pass


class TemplateExecutionError(TemplateError):
    """Raised when a template fails while rendering."""

    pass


class InputError(PluginError):
    """Raised when the compiler request cannot be read or decoded."""

    pass
