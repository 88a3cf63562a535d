"""
    Engine-fatal errors.

    These are not findings: they mean the checker itself (its rule tables) or
    the host it runs on cannot be evaluated at all. The CLI reports them and
    exits with the failure status.
"""


class CheckerError(Exception):
    """Base class of every error that aborts a subsystem evaluation."""


class UnknownStateError(CheckerError):
    """A collected service state is outside the known vocabulary."""


class FileSetError(CheckerError):
    """No file set is defined for an (OS release, tag) combination."""


class VersionTierError(CheckerError):
    """A parsed version falls into none of the tier ranges."""


class RuleTableError(CheckerError):
    """A rule produced an outcome its table does not define."""


class UnsupportedHostError(CheckerError):
    """The host is not a SLES release the checker knows about."""
