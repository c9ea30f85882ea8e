"""
Image document module for the quine registry.

Builds the Docker image config and the v2 schema 2 manifest that describe the
single-layer image, and serializes them to the exact bytes that are digested
and served.
"""

import json
import logging
from datetime import datetime

from .exceptions import ArtifactEncodingError

logger = logging.getLogger(__name__)

# Media types
MEDIA_TYPE_CONFIG = "application/vnd.docker.container.image.v1+json"
MEDIA_TYPE_MANIFEST = "application/vnd.docker.distribution.manifest.v2+json"
MEDIA_TYPE_LAYER = "application/vnd.docker.image.rootfs.diff.tar.gzip"

# Image identity
ENTRY_NAME = "quine"
AUTHOR = "quine"
CREATED_BY = "quine"
ARCHITECTURE = "amd64"
OS = "linux"
COMMAND = ["/" + ENTRY_NAME]
ENVIRONMENT = ["PATH=/"]


def format_timestamp(moment: datetime) -> str:
    """Format a timezone-aware datetime as an RFC 3339 UTC timestamp."""
    return moment.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def build_image_config(diff_id: str, created: datetime) -> dict:
    """
    Build the image config document for a single layer.

    Args:
        diff_id: Digest of the uncompressed layer tar archive
        created: Build time (UTC)

    Returns:
        Dictionary in Docker image spec v1.2 layout. Filesystem layers
        (rootfs.diff_ids) and history entries are in the same order.
    """
    timestamp = format_timestamp(created)
    return {
        "created": timestamp,
        "author": AUTHOR,
        "architecture": ARCHITECTURE,
        "os": OS,
        "config": {
            "Cmd": list(COMMAND),
            "Env": list(ENVIRONMENT),
        },
        "rootfs": {
            "diff_ids": [diff_id],
            "type": "layers",
        },
        "history": [
            {
                "created": timestamp,
                "created_by": CREATED_BY,
            }
        ],
    }


def build_manifest(config_bytes: bytes, config_digest: str, layer_bytes: bytes, layer_digest: str) -> dict:
    """
    Build the v2 schema 2 manifest referencing the config and the layer blob.

    Args:
        config_bytes: Serialized image config
        config_digest: Digest of config_bytes
        layer_bytes: Gzip compressed layer
        layer_digest: Digest of layer_bytes

    Returns:
        Manifest dictionary with one config descriptor and one layer descriptor
    """
    return {
        "schemaVersion": 2,
        "mediaType": MEDIA_TYPE_MANIFEST,
        "config": {
            "mediaType": MEDIA_TYPE_CONFIG,
            "size": len(config_bytes),
            "digest": config_digest,
        },
        "layers": [
            {
                "mediaType": MEDIA_TYPE_LAYER,
                "size": len(layer_bytes),
                "digest": layer_digest,
            }
        ],
    }


def serialize_document(document: dict) -> bytes:
    """
    Serialize a document to compact JSON bytes.

    Key order is preserved so the same document always yields the same bytes.

    Raises:
        ArtifactEncodingError: If the document holds values JSON cannot represent
    """
    try:
        data = json.dumps(document, separators=(",", ":"), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ArtifactEncodingError(f"Failed to serialize image document: {e}") from e

    logger.debug(f"Serialized document: {len(data)} bytes")
    return data
