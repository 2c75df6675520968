"""Exceptions raised by the collection generator."""


class GeneratorError(Exception):
    """Base class for generator errors."""


class SourceParseError(GeneratorError):
    """A source file could not be parsed into a clean syntax tree."""


class ConfigError(GeneratorError):
    """The generator settings are missing or invalid."""
