"""Exceptions raised by Drupal tasks.

Everything derives from ``DrupalTasksError`` so commands can catch a single
type at their boundary and report it to the operator.
"""


class DrupalTasksError(Exception):
    pass


class ConfigurationError(DrupalTasksError):
    pass


class FetchError(DrupalTasksError):
    """The primary Drupal.org issue lookup failed."""


class NotFoundError(DrupalTasksError):
    """Drupal.org reported no matching issue."""


class NoPatchesError(DrupalTasksError):
    """The issue exists but carries no file attachments."""


class DecodeError(DrupalTasksError):
    """A response body was not valid JSON."""


class WriteError(DrupalTasksError):
    """Writing patch configuration failed."""


class CommandError(DrupalTasksError):
    pass


class ExecutableError(DrupalTasksError):
    pass


class InvalidInputError(DrupalTasksError):
    pass


class InstallError(DrupalTasksError):
    pass
