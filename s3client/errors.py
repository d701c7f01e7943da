"""Error types raised by s3client commands.

Every error a command can raise derives from :class:`S3ClientError`; the
dispatcher catches that base class, prints a single line and carries on.
"""


class S3ClientError(Exception):
    """Base class for all errors surfaced to the user."""


class NotFound(S3ClientError):
    """A bucket, object or local path does not exist."""


class NotADirectory(S3ClientError):
    """A directory was required but the key names a file."""


class IsADirectory(S3ClientError):
    """A file was required but the key names a directory."""


class PreconditionFailed(S3ClientError):
    """The command is not allowed in the current state."""


class ArgumentError(S3ClientError):
    """Missing, excess or malformed command arguments."""


class Aborted(S3ClientError):
    """The user declined a confirmation or gave empty input."""

    def __init__(self, message="aborted by user"):
        super().__init__(message)


class AlreadyExists(S3ClientError):
    """The bucket or object to create is already present."""


class EnvironmentConfigError(S3ClientError):
    """A saved environment could not be read or is malformed."""


class StoreError(S3ClientError):
    """The object store reported a failure.

    ``code`` holds the S3 error code when the failure came from the service.
    """

    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


class LocalFileError(S3ClientError):
    """Reading or writing a local file failed."""


class BatchError(S3ClientError):
    """A batch operation stopped at its first failing object.

    ``result`` holds what was processed before the failure; nothing of it is
    rolled back.
    """

    def __init__(self, item, cause, result):
        self.item = item
        self.cause = cause
        self.result = result
        message = f"{cause}"
        if result.count > 0:
            message += (
                f" (stopped at {item!r}; {result.summary()} already processed, "
                "no rollback performed)"
            )
        super().__init__(message)
