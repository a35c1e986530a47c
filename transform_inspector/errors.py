"""
Transform Inspector — Errors
"""


class ConfigurationError(RuntimeError):
    """The selection or its type does not expose what the inspector needs."""


class StaleBindingError(ConfigurationError):
    """A bound property was used after its selection was replaced."""
