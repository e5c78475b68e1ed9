"""Single source of the plugin version."""

__version__ = "1.0.0"
