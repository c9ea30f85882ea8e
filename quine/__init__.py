"""
Self-hosting container registry.

Packages the running executable as a single-layer container image and serves
it through the pull side of the Docker Registry HTTP API v2, so a container
engine can pull and run a copy of the process serving it.

Architecture:
    1. At startup the running executable is read and wrapped into a tar layer
    2. The layer is gzip compressed; the image config and manifest are built
    3. The artifact set is checked for consistent digests
    4. Client requests manifest (GET /v2/<name>/manifests/<tag|digest>)
    5. Client requests blobs (GET /v2/<name>/blobs/<digest>)

Example:
    $ python app.py
    $ docker pull localhost:8080/quine:latest
"""

__version__ = "0.1.0"

from .config import Config
from .exceptions import (
    ArtifactEncodingError,
    ArtifactIntegrityError,
    ArtifactIOError,
    BuildError,
)
from .validation import compute_sha256, validate_digest, verify_artifacts
from .builder import Artifacts, build_artifacts, resolve_executable
from .state import RegistryState
from .routes import create_app

__all__ = [
    "Config",
    "BuildError",
    "ArtifactIOError",
    "ArtifactEncodingError",
    "ArtifactIntegrityError",
    "compute_sha256",
    "validate_digest",
    "verify_artifacts",
    "Artifacts",
    "build_artifacts",
    "resolve_executable",
    "RegistryState",
    "create_app",
]
