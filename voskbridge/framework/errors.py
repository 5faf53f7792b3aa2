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

"""
Custom exceptions for the Vosk native binding.
"""


class VoskBridgeError(Exception):
    """Base exception for all binding errors."""
    pass


class ConfigurationError(VoskBridgeError, ValueError):
    """Raised when recognizer parameters are inconsistent.

    Always raised before any native call is made.
    """
    pass


class NativeLibraryError(VoskBridgeError, OSError):
    """Raised when libvosk or one of its symbols cannot be loaded."""
    pass


class NativeCallError(VoskBridgeError):
    """Raised when the native layer returns a null value where data was expected."""
    pass


class InvalidHandleError(NativeCallError):
    """Raised when a null native handle is passed on to the native layer."""
    pass


class ResultParseError(VoskBridgeError, ValueError):
    """Raised when result text from the native layer is not valid JSON
    or does not match the expected result schema."""

    def __init__(self, message, raw_text=None):
        super().__init__(message)
        self.raw_text = raw_text
