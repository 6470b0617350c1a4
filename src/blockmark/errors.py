"""Exceptions raised at the package's outer edges.

The parser and editor never raise for string input; these are for the codec,
config and CLI/API layers.
"""


class BlockmarkError(Exception):
    pass


class DocumentFormatError(BlockmarkError, ValueError):
    """A serialized document (dict/JSON payload) is malformed."""


class ConfigError(BlockmarkError):
    """The config file cannot be read or has invalid values."""
