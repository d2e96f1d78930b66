"""Exception types for the audit line parser."""


class AuditParseError(Exception):
    """Base class for auditparse errors."""


class ConfigError(AuditParseError, ValueError):
    """Raised when a ParserConfig is built with invalid values."""


class LineParseError(AuditParseError):
    """Raised by the per-line policy when no tier produces a record.

    Always caught by the batch driver and turned into a ``line N: <cause>`` message.
    """
