"""Error taxonomy shared by the core and the adapters."""

from __future__ import annotations


class ReminderError(Exception):
    """Base class for every error raised by reminders."""


class ConfigError(ReminderError):
    """Configuration is missing or malformed. Fatal before any scanning."""


class SourceError(ReminderError):
    """The directive text could not be read. Fatal for the current scan."""


class SinkError(ReminderError):
    """A notification could not be delivered. Isolated to one line."""


class ParseError(ReminderError):
    """A directive carried a field that does not convert to a valid value."""
