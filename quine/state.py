"""
Registry state module for the quine registry.

Holds the immutable artifact set the HTTP handlers serve from.
"""

import logging
from dataclasses import dataclass, field

from .builder import Artifacts
from .image import MEDIA_TYPE_CONFIG, MEDIA_TYPE_LAYER

logger = logging.getLogger(__name__)

LATEST_TAG = "latest"


@dataclass(frozen=True)
class RegistryState:
    """
    Read-only snapshot of the served image.

    Lookups go through two small tables built once at construction: manifest
    references (the "latest" tag and the manifest digest) and blob digests
    (config and layer). Instances never change, so handlers may read them
    concurrently without locking.
    """

    manifest: bytes
    manifest_digest: str
    config: bytes
    config_digest: str
    layer: bytes
    layer_digest: str
    _manifests: dict = field(init=False, repr=False, compare=False)
    _blobs: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_manifests", {
            LATEST_TAG: self.manifest,
            self.manifest_digest: self.manifest,
        })
        object.__setattr__(self, "_blobs", {
            self.config_digest: (self.config, MEDIA_TYPE_CONFIG),
            self.layer_digest: (self.layer, MEDIA_TYPE_LAYER),
        })

    @classmethod
    def from_artifacts(cls, artifacts: Artifacts) -> "RegistryState":
        """Wrap the builder output."""
        return cls(
            manifest=artifacts.manifest,
            manifest_digest=artifacts.manifest_digest,
            config=artifacts.config,
            config_digest=artifacts.config_digest,
            layer=artifacts.layer,
            layer_digest=artifacts.layer_digest,
        )

    @property
    def manifest_references(self) -> tuple[str, ...]:
        return tuple(self._manifests)

    @property
    def blob_digests(self) -> tuple[str, ...]:
        return tuple(self._blobs)

    def resolve_manifest(self, reference: str) -> bytes | None:
        """
        Look up the manifest by tag or digest.

        Returns:
            Manifest bytes, or None if the reference is unknown
        """
        return self._manifests.get(reference)

    def resolve_blob(self, digest: str) -> tuple[bytes | None, str | None]:
        """
        Look up a blob (config or layer) by digest.

        Returns:
            Tuple of (blob_bytes, media_type), or (None, None) if not found
        """
        return self._blobs.get(digest, (None, None))
