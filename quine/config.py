"""
Configuration module for the quine registry.

Loads configuration from environment variables with sensible defaults.
Network binding is fixed and cannot be overridden.
"""

import os


class Config:
    """
    Registry configuration from environment variables.

    The listen address is a class constant: the registry always serves on
    0.0.0.0:8080 so that the pulled image can be addressed predictably.
    """

    HOST = "0.0.0.0"
    PORT = 8080

    def __init__(self):
        """
        Initialize configuration from environment variables.

        Environment Variables:
            LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR). Default: INFO
            QUINE_EXECUTABLE: Path of the executable to package. Default: the
                running executable
        """
        # Logging
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Payload
        self.EXECUTABLE_PATH = os.getenv("QUINE_EXECUTABLE") or None

    def __repr__(self):
        """String representation for logging."""
        return (
            f"Config(LOG_LEVEL={self.LOG_LEVEL}, "
            f"HOST={self.HOST}, "
            f"PORT={self.PORT}, "
            f"EXECUTABLE_PATH={self.EXECUTABLE_PATH})"
        )


# Global config instance
config = Config()
