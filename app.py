"""
Self-hosting container registry.

Builds a container image out of this very executable and serves it through
the Docker Registry v2 pull API on port 8080.

OCI Endpoints:
    - GET /v2/ - Version check
    - GET /v2/<name>/manifests/<tag> - Get manifest ("latest" or its digest)
    - GET /v2/<name>/blobs/<digest> - Get config or layer blob

Environment Variables:
    LOG_LEVEL, QUINE_EXECUTABLE

Example:
    $ LOG_LEVEL=DEBUG python app.py
    $ docker pull localhost:8080/quine:latest
"""

import logging
import sys

from quine.builder import build_artifacts
from quine.config import config
from quine.exceptions import BuildError
from quine.routes import create_app
from quine.state import RegistryState

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def main():
    """Main entry point for the registry application."""
    debug_mode = logger.getEffectiveLevel() == logging.DEBUG
    logger.info("Starting quine")
    logger.info(f"Configuration: {config}")
    logger.info(f"Log level: {logging.getLevelName(logger.getEffectiveLevel())}")

    try:
        artifacts = build_artifacts()
    except BuildError as e:
        logger.error(f"Failed to build image: {e}")
        sys.exit(1)

    state = RegistryState.from_artifacts(artifacts)
    logger.info(f"config {state.config_digest}")
    logger.info(f"manifest {state.manifest_digest}")
    logger.info(f"layer {state.layer_digest}")

    app = create_app(state)
    if debug_mode:
        logger.info("Flask debug mode enabled")

    logger.info(f"Starting container registry service on {config.HOST}:{config.PORT}")
    try:
        app.run(host=config.HOST, port=config.PORT, debug=debug_mode, use_reloader=False)
    except OSError as e:
        logger.error(f"Failed to start listener on {config.HOST}:{config.PORT}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
