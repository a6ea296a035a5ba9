"""Exception types raised across the package."""


class StarSystemError(Exception):
    """Base class for all star system errors."""


class SnapshotError(StarSystemError, ValueError):
    """A snapshot document is malformed or cannot be read."""


class RenderTargetError(StarSystemError, RuntimeError):
    """The requested drawing surface cannot be created."""


class ResourceError(StarSystemError):
    """An external resource (e.g. a custom station icon) failed to load."""


class ExportError(StarSystemError, RuntimeError):
    """An export call failed; the rest of the scene is unaffected."""
