"""
Flask application and registry endpoints.

Implements the pull side of the Docker Registry HTTP API v2: the version check,
manifest fetch and blob fetch. All handlers read the RegistryState registered
on the application by create_app().
"""

import logging
from flask import Blueprint, Flask, Response, current_app
from werkzeug.http import HTTP_STATUS_CODES

from .image import MEDIA_TYPE_CONFIG, MEDIA_TYPE_MANIFEST
from .state import RegistryState

logger = logging.getLogger(__name__)

DOCKER_CONTENT_DIGEST = "Docker-Content-Digest"
STATE_EXTENSION = "registry_state"

bp = Blueprint("registry", __name__)


def create_app(state: RegistryState) -> Flask:
    """
    Create the Flask application serving the given registry state.

    Args:
        state: Built artifact set to serve

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    app.extensions[STATE_EXTENSION] = state
    app.register_blueprint(bp)
    logger.debug(f"Registered routes: {[rule.rule for rule in app.url_map.iter_rules()]}")
    return app


def get_state() -> RegistryState:
    return current_app.extensions[STATE_EXTENSION]


# -------------------------------
# Registry Endpoints
# -------------------------------


@bp.route("/v2/")
def v2_root():
    """
    Registry API version check endpoint.

    Returns HTTP 200 with an empty body to indicate the registry speaks the
    Docker Registry v2 API. Clients probe this before pulling.

    Headers:
        Docker-Distribution-API-Version: registry/2.0
    """
    logger.info("Registry v2 API root accessed")
    resp = Response(status=200)
    resp.headers["Docker-Distribution-API-Version"] = "registry/2.0"
    return resp


@bp.route("/v2/<path:image_name>/manifests/<reference>")
def get_manifest(image_name, reference):
    """
    Get the image manifest by tag ("latest") or by manifest digest.

    The image name is not used for lookups: the registry holds a single image.

    Response Headers:
        Content-Type: application/vnd.docker.distribution.manifest.v2+json
        Docker-Content-Digest: digest of the manifest

    Returns:
        - 200 with the manifest JSON
        - 404 with body "{}" for an unknown reference
    """
    state = get_state()
    manifest_bytes = state.resolve_manifest(reference)

    if manifest_bytes is None:
        logger.warning(f"Manifest not found: image='{image_name}', reference='{reference}'")
        return Response("{}", status=404, mimetype="application/json")

    resp = Response(manifest_bytes, status=200)
    resp.headers["Content-Type"] = MEDIA_TYPE_MANIFEST
    resp.headers[DOCKER_CONTENT_DIGEST] = state.manifest_digest
    logger.info(f"Manifest sent: image='{image_name}', reference='{reference}', digest={state.manifest_digest}")
    return resp


@bp.route("/v2/<path:image_name>/blobs/<digest>")
def get_blob(image_name, digest):
    """
    Get a blob (config or layer) by digest.

    Response Headers:
        Docker-Content-Digest: the requested digest
        Content-Type: application/vnd.docker.container.image.v1+json for the
            config blob only; layer responses carry no Content-Type

    Returns:
        - 200 with the blob bytes
        - 404 with the plain text "Not Found" for an unknown digest
    """
    state = get_state()
    blob_bytes, media_type = state.resolve_blob(digest)

    if blob_bytes is None:
        logger.warning(f"Blob not found: image='{image_name}', digest='{digest}'")
        return Response(HTTP_STATUS_CODES[404], status=404, mimetype="text/plain")

    resp = Response(blob_bytes, status=200)
    if media_type == MEDIA_TYPE_CONFIG:
        resp.headers["Content-Type"] = MEDIA_TYPE_CONFIG
    else:
        del resp.headers["Content-Type"]
    resp.headers[DOCKER_CONTENT_DIGEST] = digest
    logger.info(f"Blob sent: image='{image_name}', digest='{digest}', size: {len(blob_bytes)} bytes")
    return resp
