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
VoskBridge: ctypes binding for the Vosk speech recognition library.

Handles returned by the native layer are owned by the wrapping objects and
released only by explicit ``free()`` calls. Nothing is freed on garbage
collection and nothing guards against use after free.
"""

from voskbridge.framework.errors import (
    ConfigurationError,
    InvalidHandleError,
    NativeCallError,
    NativeLibraryError,
    ResultParseError,
    VoskBridgeError,
)
from voskbridge.framework.marshal import convert_string_to_ptr
from voskbridge.framework.model import Model, SpeakerModel
from voskbridge.framework.native import set_log_level
from voskbridge.framework.recognizer import (
    GrammarParams,
    PlainParams,
    Recognizer,
    RecognizerParams,
    SpeakerParams,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "GrammarParams",
    "InvalidHandleError",
    "Model",
    "NativeCallError",
    "NativeLibraryError",
    "PlainParams",
    "Recognizer",
    "RecognizerParams",
    "ResultParseError",
    "SpeakerModel",
    "SpeakerParams",
    "VoskBridgeError",
    "convert_string_to_ptr",
    "set_log_level",
]
