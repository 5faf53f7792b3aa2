import logging
import os
import tempfile
import unittest
from logging.handlers import RotatingFileHandler

from voskbridge.framework.logging_setup import LoggingManager, logging_manager


class TestLoggingManager(unittest.TestCase):
    """Console and rotating file handlers on a dedicated logger"""

    def setUp(self):
        self.name = "voskbridge.test_logging"
        self.logger = logging.getLogger(self.name)

    def tearDown(self):
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

    def test_singleton(self):
        self.assertIs(LoggingManager(), logging_manager)

    def test_console_only(self):
        logger = logging_manager.setup(log_level="debug", name=self.name)

        self.assertIs(logger, self.logger)
        self.assertIs(logging_manager.logger, self.logger)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)

    def test_file_handler(self):
        with tempfile.TemporaryDirectory() as log_dir:
            logger = logging_manager.setup(
                log_dir=os.path.join(log_dir, "logs"),
                log_level="WARNING",
                name=self.name,
            )
            logger.warning("model failed to load")
            for handler in logger.handlers:
                handler.flush()

            file_handlers = [
                h for h in logger.handlers
                if isinstance(h, RotatingFileHandler)
            ]
            self.assertEqual(len(file_handlers), 1)
            log_file = os.path.join(log_dir, "logs", "voskbridge.log")
            with open(log_file) as f:
                self.assertIn("model failed to load", f.read())
            self.tearDown()

    def test_repeated_setup_replaces_handlers(self):
        logging_manager.setup(name=self.name)
        logger = logging_manager.setup(name=self.name)
        self.assertEqual(len(logger.handlers), 1)

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            logging_manager.setup(log_level="LOUD", name=self.name)


if __name__ == "__main__":
    unittest.main()
