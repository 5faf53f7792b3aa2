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

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Optional


@dataclass
class TranscriptEvent:
    """One step of a streaming transcription"""

    text: str
    is_final: bool
    data: Dict[str, Any] = field(default_factory=dict)


class STTBackend(ABC):
    """Abstract base class for Speech-to-Text backends"""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize STT backend with configuration

        Args:
            config: Dictionary overriding values read from the
                    configuration file
        """
        self.config = config or {}

    @abstractmethod
    def transcribe_stream(
        self, chunks: Iterable[bytes]
    ) -> Iterator[TranscriptEvent]:
        """Transcribe a stream of raw PCM chunks"""
        pass

    @abstractmethod
    def transcribe_file(self, audio_file: str) -> str:
        """Transcribe an existing audio file to text"""
        pass
