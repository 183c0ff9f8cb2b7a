"""Exception hierarchy for GemShield."""


class GemShieldError(Exception):
    """Base class for all GemShield errors."""


class MalformedVersion(GemShieldError, ValueError):
    """A version string could not be parsed."""


class MalformedSpec(GemShieldError, ValueError):
    """A version requirement could not be tokenized into operator and version."""


class InvalidAdvisory(GemShieldError, ValueError):
    """An advisory record is missing required fields or has the wrong shape."""


class NotADirectory(GemShieldError, NotADirectoryError):
    """The advisory database root is not a readable directory."""


class DatabaseSyncError(GemShieldError):
    """Cloning or updating the advisory database failed."""


class LockfileError(GemShieldError):
    """A lockfile could not be read."""
