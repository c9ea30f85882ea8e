"""
Artifact builder module for the quine registry.

Packages the running executable as a single-layer container image: a one-entry
tar archive, its gzip compressed layer blob, the image config and the manifest.
"""

import gzip
import io
import logging
import os
import sys
import tarfile
import zlib
from datetime import datetime, timezone
from typing import NamedTuple

from .config import config
from .exceptions import ArtifactIOError
from .image import ENTRY_NAME, build_image_config, build_manifest, serialize_document
from .validation import compute_sha256, verify_artifacts

logger = logging.getLogger(__name__)

ENTRY_MODE = 0o755


class Artifacts(NamedTuple):
    """The complete, cross-referenced artifact set of the image."""

    archive: bytes
    diff_id: str
    config: bytes
    config_digest: str
    layer: bytes
    layer_digest: str
    manifest: bytes
    manifest_digest: str


def resolve_executable() -> str:
    """
    Resolve the path of the executable to package.

    Resolution order:
        1. QUINE_EXECUTABLE environment variable
        2. sys.executable for frozen (single-file) builds
        3. the launched program, sys.argv[0]

    Returns:
        Absolute, symlink-free path

    Raises:
        ArtifactIOError: If no path can be determined
    """
    if config.EXECUTABLE_PATH:
        path = config.EXECUTABLE_PATH
    elif getattr(sys, "frozen", False):
        path = sys.executable
    else:
        path = sys.argv[0] if sys.argv else ""

    if not path:
        raise ArtifactIOError("Unable to resolve the current executable")

    resolved = os.path.realpath(path)
    logger.debug(f"Resolved executable: {resolved}")
    return resolved


def read_executable(path: str) -> bytes:
    """
    Read the full contents of the executable.

    Raises:
        ArtifactIOError: If the file cannot be opened or read
    """
    try:
        with open(path, "rb") as f:
            payload = f.read()
    except OSError as e:
        raise ArtifactIOError(f"Failed to read executable {path}: {e}") from e

    logger.info(f"Read executable {path}: {len(payload)} bytes")
    return payload


def create_archive(payload: bytes) -> bytes:
    """
    Wrap the payload in a tar archive holding exactly one entry.

    The entry is named ENTRY_NAME with mode 0755 and a zero mtime, so the
    archive (and therefore the diff_id) only depends on the payload.

    Raises:
        ArtifactIOError: If the archive cannot be written
    """
    info = tarfile.TarInfo(name=ENTRY_NAME)
    info.mode = ENTRY_MODE
    info.size = len(payload)

    buf = io.BytesIO()
    try:
        with tarfile.open(fileobj=buf, mode="w", format=tarfile.USTAR_FORMAT) as tar:
            tar.addfile(info, io.BytesIO(payload))
    except (OSError, tarfile.TarError) as e:
        raise ArtifactIOError(f"Failed to write layer archive: {e}") from e

    archive = buf.getvalue()
    logger.debug(f"Created archive: {len(archive)} bytes, entry size: {info.size}")
    return archive


def compress(archive: bytes) -> bytes:
    """
    Gzip the archive into the layer blob.

    The gzip header mtime is zeroed. The compressed bytes are still only stable
    for a given zlib build and compression level.

    Raises:
        ArtifactIOError: If compression fails
    """
    try:
        layer = gzip.compress(archive, mtime=0)
    except (OSError, zlib.error) as e:
        raise ArtifactIOError(f"Failed to compress layer: {e}") from e

    logger.debug(f"Compressed layer: {len(archive)} -> {len(layer)} bytes")
    return layer


def build_artifacts(executable_path: str | None = None, created: datetime | None = None) -> Artifacts:
    """
    Build the full image artifact set from an executable.

    Args:
        executable_path: Executable to package. Default: resolve_executable()
        created: Build timestamp recorded in the config. Default: now (UTC)

    Returns:
        Artifacts with every digest computed over the exact served bytes

    Raises:
        ArtifactIOError: If the executable cannot be read or archived
        ArtifactEncodingError: If a document cannot be serialized
        ArtifactIntegrityError: If the resulting artifacts are inconsistent
    """
    if executable_path is None:
        executable_path = resolve_executable()
    if created is None:
        created = datetime.now(timezone.utc)

    payload = read_executable(executable_path)

    archive = create_archive(payload)
    diff_id = compute_sha256(archive)
    logger.debug(f"Layer diff_id: {diff_id}")

    layer = compress(archive)
    layer_digest = compute_sha256(layer)
    logger.debug(f"Layer digest: {layer_digest}, size: {len(layer)} bytes")

    config_bytes = serialize_document(build_image_config(diff_id, created))
    config_digest = compute_sha256(config_bytes)
    logger.debug(f"Config digest: {config_digest}, size: {len(config_bytes)} bytes")

    manifest_bytes = serialize_document(build_manifest(config_bytes, config_digest, layer, layer_digest))
    manifest_digest = compute_sha256(manifest_bytes)
    logger.debug(f"Manifest digest: {manifest_digest}, size: {len(manifest_bytes)} bytes")

    artifacts = Artifacts(
        archive=archive,
        diff_id=diff_id,
        config=config_bytes,
        config_digest=config_digest,
        layer=layer,
        layer_digest=layer_digest,
        manifest=manifest_bytes,
        manifest_digest=manifest_digest,
    )
    verify_artifacts(artifacts)

    logger.info(f"Built image artifacts from {executable_path}")
    return artifacts
