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
Conversions between Python values and the C types libvosk expects.
"""

import ctypes
from typing import Optional, Tuple, Union

from voskbridge.framework.errors import NativeCallError

ENCODING = "utf-8"


def convert_string_to_ptr(value: str) -> ctypes.Array:
    """Encode ``value`` into a fresh null-terminated char buffer.

    The buffer holds the UTF-8 bytes of ``value`` followed by exactly one
    zero byte, so ``len(buffer) == len(value.encode()) + 1``. It can be
    passed wherever a ``c_char_p`` argument is declared.
    """
    if not isinstance(value, str):
        raise TypeError(f"Expected str, got {type(value).__name__}")
    return ctypes.create_string_buffer(value.encode(ENCODING))


def decode_native_string(raw: Optional[bytes], function_name: str = "") -> str:
    """Turn a ``c_char_p`` return value into text.

    ctypes copies the native string into ``bytes`` when the call returns,
    so nothing here points into memory owned by libvosk.
    """
    if raw is None:
        raise NativeCallError(
            f"{function_name or 'native call'} returned a null string"
        )
    return raw.decode(ENCODING)


def waveform_buffer(
    data: Union[bytes, bytearray, memoryview]
) -> Tuple[bytes, int]:
    """Prepare raw 16-bit little-endian PCM for accept_waveform.

    Returns the buffer and its length in bytes (not samples).
    """
    if isinstance(data, bytes):
        return data, len(data)
    if isinstance(data, (bytearray, memoryview)):
        buffer = bytes(data)
        return buffer, len(buffer)
    raise TypeError(
        "Waveform data must be bytes, bytearray or memoryview, "
        f"got {type(data).__name__}"
    )
