"""Exceptions raised while building the image artifacts."""


class BuildError(Exception):
    """Base exception for failures of the build phase."""

    pass


class ArtifactIOError(BuildError):
    """Raised when the executable cannot be read or an archive cannot be written."""

    pass


class ArtifactEncodingError(BuildError):
    """Raised when an image document cannot be serialized."""

    pass


class ArtifactIntegrityError(BuildError):
    """Raised when the built artifacts do not reference each other correctly."""

    pass
