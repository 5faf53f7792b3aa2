# VoskBridge Project
# Copyright (C) 2025 Rubén Gómez - khromalabs.org
#
# This file is dual-licensed under:
# 1. GNU Lesser General Public License v3.0 (LGPL-3.0)
#    (See the included LICENSE_LGPL3.txt file or look into
#    <https://www.gnu.org/licenses/lgpl-3.0.html> for details)
# 2. Commercial license
#    (Contact: rgomez@khromalabs.org for licensing options)
#
# You may use, distribute and modify this code under the terms of either license.
# This notice must be preserved in all copies or substantial portions of the code.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# Lesser General Public License for more details.

import logging
import os
from logging.handlers import RotatingFileHandler

LOG_FILE_NAME = "voskbridge.log"


class LoggingManager:
    """Manages package-wide logging configuration"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(LoggingManager, cls).__new__(cls)
            cls._instance._logger = None
        return cls._instance

    def setup(self, log_dir=None, log_level="INFO", name="voskbridge"):
        """Configure logging to console and optionally to rotating file

        Only the ``name`` logger is touched, so applications embedding the
        binding keep their own root configuration.
        """
        logger = logging.getLogger(name)
        level = getattr(logging, str(log_level).upper(), None)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        logger.setLevel(level)

        # Remove existing handlers
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)s: %(message)s")
        )
        logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            log_file = os.path.join(log_dir, LOG_FILE_NAME)
            file_handler = RotatingFileHandler(
                log_file, maxBytes=1024 * 1024, backupCount=5  # 1MB
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
                )
            )
            logger.addHandler(file_handler)

        self._logger = logger
        return logger

    @property
    def logger(self):
        """Get the configured logger instance"""
        return self._logger


# Create singleton instance
logging_manager = LoggingManager()
