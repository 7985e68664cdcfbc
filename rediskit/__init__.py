"""Redis reply values, conversions, command arguments, stream replies, scripts and pipelines."""

__version__ = "0.1.0"