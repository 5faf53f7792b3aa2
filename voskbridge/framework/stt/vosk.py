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
import wave
from typing import Any, Dict, Iterable, Iterator, List, Optional

from voskbridge.framework.config import ConfigManager
from voskbridge.framework.model import Model, SpeakerModel
from voskbridge.framework.recognizer import Recognizer
from voskbridge.framework.stt.base import STTBackend, TranscriptEvent

logger = logging.getLogger(__name__)


def result_text(result: Dict[str, Any]) -> str:
    """Best transcript of a result, alternatives included"""
    if "text" in result:
        return result["text"]
    alternatives = result.get("alternatives") or []
    return alternatives[0]["text"] if alternatives else ""


class VoskSTT(STTBackend):
    """Vosk implementation of STT backend

    Recognized keys in ``config``: ``model_path`` (required),
    ``spk_model_path``, ``grammar``, ``sample_rate`` and ``chunk_frames``.
    Anything missing is read from the configuration file.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        config_manager: Optional[ConfigManager] = None,
    ):
        super().__init__(config)
        if config_manager is None:
            from voskbridge.framework.config import config as config_manager
        self.config_manager = config_manager

        self.model_path = self.config.get("model_path")
        if not self.model_path:
            raise ValueError("VoskSTT requires a model_path")
        self.spk_model_path = self.config.get("spk_model_path")
        self.grammar = self.config.get("grammar")
        self.sample_rate = self.config.get(
            "sample_rate",
            config_manager.get("recognizer.sample_rate", 16000),
        )
        self.chunk_frames = int(
            self.config.get(
                "chunk_frames", config_manager.get("stt.chunk_frames", 4000)
            )
        )

        logger.info(
            f"Initializing Vosk with model={self.model_path}, "
            f"speaker_model={self.spk_model_path}, "
            f"sample_rate={self.sample_rate}"
        )
        self.model = None
        self.spk_model = None

    def _load_model(self):
        """Load the models if not already loaded"""
        if self.model is None:
            logger.info(f"Loading Vosk model {self.model_path} (first time)...")
            self.model = Model(self.model_path)
            if self.spk_model_path:
                self.spk_model = SpeakerModel(self.spk_model_path)
        else:
            logger.debug("Using already loaded Vosk model (cached)")

    def _create_recognizer(self, sample_rate=None) -> Recognizer:
        self._load_model()
        return Recognizer.from_config(
            self.model,
            speaker_model=self.spk_model,
            grammar=self.grammar,
            sample_rate=sample_rate or self.sample_rate,
            config_manager=self.config_manager,
        )

    def transcribe_stream(
        self, chunks: Iterable[bytes], sample_rate=None
    ) -> Iterator[TranscriptEvent]:
        """Yield partial and final events for a stream of PCM chunks.

        The last event is always the final result of the stream.
        """
        recognizer = self._create_recognizer(sample_rate)
        try:
            for chunk in chunks:
                if recognizer.accept_waveform(chunk):
                    result = recognizer.result()
                    yield TranscriptEvent(result_text(result), True, result)
                else:
                    partial = recognizer.partial_result()
                    if partial.get("partial"):
                        yield TranscriptEvent(partial["partial"], False, partial)
            result = recognizer.final_result()
            yield TranscriptEvent(result_text(result), True, result)
        finally:
            recognizer.free()

    def read_wave_chunks(self, wave_file) -> Iterator[bytes]:
        while True:
            data = wave_file.readframes(self.chunk_frames)
            if not data:
                break
            yield data

    def transcribe_file(self, audio_file: str) -> str:
        """Transcribe a 16-bit mono PCM WAV file"""
        return " ".join(
            event.text for event in self.transcribe_file_events(audio_file)
            if event.is_final and event.text
        )

    def transcribe_file_events(self, audio_file: str) -> List[TranscriptEvent]:
        with wave.open(str(audio_file), "rb") as wf:
            if (
                wf.getnchannels() != 1
                or wf.getsampwidth() != 2
                or wf.getcomptype() != "NONE"
            ):
                raise ValueError(
                    f"{audio_file} must be WAV format mono PCM 16-bit"
                )
            logger.info(
                f"Transcribing {audio_file} ({wf.getframerate()} Hz,"
                f" {wf.getnframes()} frames)"
            )
            return list(
                self.transcribe_stream(
                    self.read_wave_chunks(wf), sample_rate=wf.getframerate()
                )
            )

    def close(self):
        """Free the native models held by this backend"""
        if self.spk_model is not None:
            self.spk_model.free()
            self.spk_model = None
        if self.model is not None:
            self.model.free()
            self.model = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
