"""Tests for the registry HTTP endpoints."""

import gzip
import json

import pytest

from quine.builder import build_artifacts
from quine.image import MEDIA_TYPE_CONFIG, MEDIA_TYPE_MANIFEST
from quine.routes import DOCKER_CONTENT_DIGEST, create_app
from quine.state import RegistryState
from quine.validation import compute_sha256

UNKNOWN_DIGEST = "sha256:deadbeef" + "0" * 56


def test_v2_root(client):
    resp = client.get("/v2/")
    assert resp.status_code == 200
    assert resp.data == b""
    assert resp.headers["Docker-Distribution-API-Version"] == "registry/2.0"


@pytest.mark.parametrize("content", [b"", b"#!/bin/sh\n", bytes(range(256)) * 64])
def test_v2_root_independent_of_payload(tmp_path, content):
    path = tmp_path / "quine"
    path.write_bytes(content)
    client = create_app(RegistryState.from_artifacts(build_artifacts(str(path)))).test_client()

    resp = client.get("/v2/")
    assert resp.status_code == 200
    assert resp.data == b""


def test_manifest_latest(client, state):
    resp = client.get("/v2/quine/manifests/latest")
    assert resp.status_code == 200
    assert resp.data == state.manifest
    assert resp.headers["Content-Type"] == MEDIA_TYPE_MANIFEST
    assert resp.headers[DOCKER_CONTENT_DIGEST] == state.manifest_digest
    assert compute_sha256(resp.data) == state.manifest_digest


def test_manifest_by_digest_matches_latest(client, state):
    by_tag = client.get("/v2/quine/manifests/latest")
    by_digest = client.get(f"/v2/quine/manifests/{state.manifest_digest}")

    assert by_digest.status_code == 200
    assert by_digest.data == by_tag.data
    assert sorted(by_digest.headers.items()) == sorted(by_tag.headers.items())


@pytest.mark.parametrize("reference", ["nonexistent", "v1.0", UNKNOWN_DIGEST])
def test_manifest_not_found(client, reference):
    resp = client.get(f"/v2/quine/manifests/{reference}")
    assert resp.status_code == 404
    assert resp.data == b"{}"
    assert DOCKER_CONTENT_DIGEST not in resp.headers


def test_manifest_ignores_image_name(client, state):
    resp = client.get("/v2/library/anything/manifests/latest")
    assert resp.status_code == 200
    assert resp.data == state.manifest


def test_manifest_head(client, state):
    resp = client.head("/v2/quine/manifests/latest")
    assert resp.status_code == 200
    assert resp.data == b""
    assert resp.headers[DOCKER_CONTENT_DIGEST] == state.manifest_digest


def test_config_blob(client, state):
    resp = client.get(f"/v2/quine/blobs/{state.config_digest}")
    assert resp.status_code == 200
    assert resp.data == state.config
    assert resp.headers["Content-Type"] == MEDIA_TYPE_CONFIG
    assert resp.headers[DOCKER_CONTENT_DIGEST] == state.config_digest


def test_layer_blob(client, state):
    resp = client.get(f"/v2/quine/blobs/{state.layer_digest}")
    assert resp.status_code == 200
    assert resp.data == state.layer
    assert resp.headers[DOCKER_CONTENT_DIGEST] == state.layer_digest
    assert "Content-Type" not in resp.headers


@pytest.mark.parametrize("digest", ["sha256:deadbeef", UNKNOWN_DIGEST, "latest"])
def test_blob_not_found(client, digest):
    resp = client.get(f"/v2/quine/blobs/{digest}")
    assert resp.status_code == 404
    assert resp.data == b"Not Found"
    assert resp.data != b"{}"
    assert resp.mimetype == "text/plain"


def test_blob_diff_id_not_served(client, artifacts):
    resp = client.get(f"/v2/quine/blobs/{artifacts.diff_id}")
    assert resp.status_code == 404


def test_manifest_descriptors_match_served_blobs(client):
    """Every descriptor in the served manifest resolves to bytes with that digest."""
    manifest = json.loads(client.get("/v2/quine/manifests/latest").data)

    descriptors = [manifest["config"]] + manifest["layers"]
    for descriptor in descriptors:
        resp = client.get(f"/v2/quine/blobs/{descriptor['digest']}")
        assert resp.status_code == 200
        assert compute_sha256(resp.data) == descriptor["digest"]
        assert len(resp.data) == descriptor["size"]


def test_pull_round_trip(client):
    """Decompressing the served layer reproduces the diff_id recorded in the served config."""
    manifest = json.loads(client.get("/v2/quine/manifests/latest").data)
    image_config = json.loads(client.get(f"/v2/quine/blobs/{manifest['config']['digest']}").data)
    layer = client.get(f"/v2/quine/blobs/{manifest['layers'][0]['digest']}").data

    archive = gzip.decompress(layer)
    assert compute_sha256(archive) == image_config["rootfs"]["diff_ids"][0]


@pytest.mark.parametrize("method", ["put", "post", "delete", "patch"])
def test_write_methods_not_routed(client, method):
    resp = getattr(client, method)("/v2/quine/manifests/latest")
    assert resp.status_code == 405
