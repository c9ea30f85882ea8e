"""
Digest and integrity validation module for the quine registry.

Provides the content digest function and the consistency check run on the
artifact set before the registry starts serving.
"""

import hashlib
import json
import logging
import re

from .exceptions import ArtifactIntegrityError

logger = logging.getLogger(__name__)

DIGEST_PATTERN = re.compile(r"^sha256:[a-f0-9]{64}$")


def compute_sha256(data: bytes) -> str:
    """
    Compute SHA256 digest in OCI/Docker format.

    Args:
        data: Bytes to hash

    Returns:
        String in format "sha256:<64 hex chars>"

    Example:
        >>> compute_sha256(b"hello")
        'sha256:2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    h = hashlib.sha256()
    h.update(data)
    return "sha256:" + h.hexdigest()


def validate_digest(digest: str) -> bool:
    """
    Check that a digest matches sha256:<64 lowercase hex characters>.

    Example:
        Valid: "sha256:abc123...def" (64 hex chars after colon)
        Invalid: "sha256:ABC123" (uppercase), "md5:123" (wrong algorithm)
    """
    return isinstance(digest, str) and DIGEST_PATTERN.match(digest) is not None


def _require(condition: bool, message: str) -> None:
    if not condition:
        logger.error(f"Artifact integrity check failed: {message}")
        raise ArtifactIntegrityError(message)


def verify_artifacts(artifacts) -> None:
    """
    Verify that a built artifact set is internally consistent.

    Checks:
        - every digest is well formed and matches the bytes it names
        - config rootfs.diff_ids[0] is the digest of the uncompressed archive
        - the manifest config descriptor matches the config blob
        - the manifest layer descriptor matches the compressed layer blob

    Args:
        artifacts: Artifacts produced by the builder

    Raises:
        ArtifactIntegrityError: On the first inconsistency found
    """
    for name in ("diff_id", "config_digest", "layer_digest", "manifest_digest"):
        _require(validate_digest(getattr(artifacts, name)), f"malformed {name}: {getattr(artifacts, name)!r}")

    _require(artifacts.diff_id == compute_sha256(artifacts.archive), "diff_id does not match archive")
    _require(artifacts.config_digest == compute_sha256(artifacts.config), "config digest does not match config")
    _require(artifacts.layer_digest == compute_sha256(artifacts.layer), "layer digest does not match layer")
    _require(artifacts.manifest_digest == compute_sha256(artifacts.manifest), "manifest digest does not match manifest")
    _require(artifacts.diff_id != artifacts.layer_digest, "diff_id and layer digest must differ")

    try:
        image_config = json.loads(artifacts.config)
        manifest = json.loads(artifacts.manifest)
    except ValueError as e:
        raise ArtifactIntegrityError(f"Image document is not valid JSON: {e}") from e

    _require(image_config["rootfs"]["diff_ids"] == [artifacts.diff_id], "config diff_ids do not match archive")
    _require(
        len(image_config["history"]) == len(image_config["rootfs"]["diff_ids"]),
        "config history and diff_ids differ in length",
    )

    config_descriptor = manifest["config"]
    _require(config_descriptor["digest"] == artifacts.config_digest, "manifest config digest mismatch")
    _require(config_descriptor["size"] == len(artifacts.config), "manifest config size mismatch")

    _require(len(manifest["layers"]) == 1, "manifest must list exactly one layer")
    layer_descriptor = manifest["layers"][0]
    _require(layer_descriptor["digest"] == artifacts.layer_digest, "manifest layer digest mismatch")
    _require(layer_descriptor["size"] == len(artifacts.layer), "manifest layer size mismatch")

    logger.debug("Artifact integrity check passed")
