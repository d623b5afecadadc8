"""Exceptions raised by the service layer."""


class KeeperError(Exception):
    """Base class for all Keeper errors."""


class ServiceError(KeeperError):
    """A service operation could not be carried out.

    When raised from another exception the original error is kept as
    ``__cause__`` (``raise ServiceError(...) from exc``).
    """


class InvalidArgumentError(ServiceError, ValueError):
    """A caller passed an argument the operation refuses to act on."""
