"""Exception hierarchy for the gerritpick pipeline.

The CLI maps these onto click exceptions; nothing in gerritpick_core knows
about click.
"""

from __future__ import annotations


class GerritPickError(Exception):
    """Base class for every error raised by gerritpick_core."""


class ConfigError(GerritPickError):
    """Missing or invalid configuration: no remote URL, bad scheme, bad verb."""


class TransportError(GerritPickError):
    """The query transport (ssh or HTTP) could not deliver a response."""


class ParseError(GerritPickError):
    """The transport response was not valid JSON after trimming."""


class SchemaError(ParseError):
    """A change record is missing a field required by its wire schema."""

    def __init__(self, field: str, schema: str):
        self.field = field
        self.schema = schema
        super().__init__(f"Missing required field '{field}' in {schema} change record")
