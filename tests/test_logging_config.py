"""
Tests for the server logging setup.
"""

import logging

from pudgy_pet.logging_config import configure_logging


class TestConfigureLogging:
    def test_aligns_package_and_uvicorn_levels(self):
        """Test the configured level applies to our loggers and uvicorn's."""
        logger = configure_logging("warning")

        assert logger.name == "pudgy_pet"
        assert logger.level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
        assert logging.getLogger("uvicorn.error").level == logging.WARNING
