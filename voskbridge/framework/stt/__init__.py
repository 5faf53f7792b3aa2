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

from voskbridge.framework.stt.base import STTBackend, TranscriptEvent
from voskbridge.framework.stt.vosk import VoskSTT

# Registry of available STT backends
STT_BACKENDS = {
    "vosk": VoskSTT,
}


def get_stt_backend(backend_type, **config):
    """Get an STT backend instance by type"""
    if backend_type not in STT_BACKENDS:
        raise ValueError(f"Unknown STT backend type: {backend_type}")
    return STT_BACKENDS[backend_type](config)


__all__ = [
    "STTBackend",
    "STT_BACKENDS",
    "TranscriptEvent",
    "VoskSTT",
    "get_stt_backend",
]
