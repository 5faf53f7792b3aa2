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
Streaming recognizer bound to a native libvosk recognizer handle.

A recognizer is built in one of three flavours: plain, restricted to a
grammar, or extracting speaker embeddings. Grammar and speaker model are
mutually exclusive and the combination is rejected before libvosk is
called.

The binding adds no locking. Calls on one recognizer must not overlap
across threads, and the models it was built from must outlive it.
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from voskbridge.framework import native
from voskbridge.framework.errors import ConfigurationError, InvalidHandleError
from voskbridge.framework.marshal import (
    convert_string_to_ptr,
    decode_native_string,
    waveform_buffer,
)
from voskbridge.framework.model import Model, SpeakerModel
from voskbridge.framework.results import (
    PartialResults,
    RecognitionResults,
    SpeakerResults,
    parse_partial_result,
    parse_result,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecognizerParams:
    """Construction parameters shared by every recognizer flavour"""

    model: Model
    sample_rate: float

    @staticmethod
    def build(
        model: Model,
        sample_rate: float,
        grammar: Optional[Iterable[str]] = None,
        speaker_model: Optional[SpeakerModel] = None,
    ) -> "RecognizerParams":
        """Select the flavour matching the supplied options.

        Raises:
            ConfigurationError: grammar and speaker_model are both given,
                the grammar is not a list of strings or the sample rate is
                not a positive finite number.
        """
        if grammar is not None and speaker_model is not None:
            raise ConfigurationError(
                "grammar and speaker_model cannot be used together"
            )
        try:
            sample_rate = float(sample_rate)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid sample rate: {sample_rate!r}"
            ) from e
        if not math.isfinite(sample_rate) or sample_rate <= 0:
            raise ConfigurationError(
                "Sample rate must be a positive finite number,"
                f" got {sample_rate}"
            )

        if grammar is not None:
            if isinstance(grammar, (str, bytes)):
                raise ConfigurationError(
                    "grammar must be a list of phrases, not a single string"
                )
            phrases = tuple(grammar)
            for phrase in phrases:
                if not isinstance(phrase, str):
                    raise ConfigurationError(
                        f"Grammar entries must be strings, got {phrase!r}"
                    )
            return GrammarParams(model, sample_rate, phrases)
        if speaker_model is not None:
            return SpeakerParams(model, sample_rate, speaker_model)
        return PlainParams(model, sample_rate)


@dataclass(frozen=True)
class PlainParams(RecognizerParams):
    pass


@dataclass(frozen=True)
class GrammarParams(RecognizerParams):
    grammar: Tuple[str, ...] = ()

    def grammar_json(self) -> str:
        return json.dumps(list(self.grammar), ensure_ascii=False)


@dataclass(frozen=True)
class SpeakerParams(RecognizerParams):
    speaker_model: Optional[SpeakerModel] = None


class Recognizer:
    """Wrapper around a native recognizer handle"""

    def __init__(
        self,
        model: Model,
        sample_rate: float,
        grammar: Optional[Iterable[str]] = None,
        speaker_model: Optional[SpeakerModel] = None,
    ):
        params = RecognizerParams.build(
            model, sample_rate, grammar=grammar, speaker_model=speaker_model
        )
        self._init_from_params(params)

    @classmethod
    def from_params(cls, params: RecognizerParams) -> "Recognizer":
        recognizer = cls.__new__(cls)
        recognizer._init_from_params(params)
        return recognizer

    @classmethod
    def from_config(
        cls,
        model: Model,
        speaker_model: Optional[SpeakerModel] = None,
        grammar: Optional[Iterable[str]] = None,
        sample_rate: Optional[float] = None,
        config_manager=None,
    ) -> "Recognizer":
        """Build a recognizer using the ``recognizer.*`` configuration keys

        An explicit ``sample_rate`` wins over ``recognizer.sample_rate``.
        """
        if config_manager is None:
            from voskbridge.framework.config import config as config_manager

        if sample_rate is None:
            sample_rate = config_manager.get("recognizer.sample_rate", 16000)
        recognizer = cls(
            model,
            sample_rate,
            grammar=grammar,
            speaker_model=speaker_model,
        )
        if config_manager.get("recognizer.words", False):
            recognizer.set_words(True)
        if config_manager.get("recognizer.partial_words", False):
            recognizer.set_partial_words(True)
        max_alternatives = config_manager.get("recognizer.max_alternatives", 0)
        if max_alternatives:
            recognizer.set_max_alternatives(max_alternatives)
        return recognizer

    def _init_from_params(self, params: RecognizerParams):
        self.params = params
        self.model = params.model
        self.sample_rate = params.sample_rate
        self.speaker_model = getattr(params, "speaker_model", None)
        self.grammar = getattr(params, "grammar", None)

        if not self.model.valid:
            raise InvalidHandleError(
                f"Cannot create a recognizer from unloaded model {self.model!r}"
            )
        if self.speaker_model is not None and not self.speaker_model.valid:
            raise InvalidHandleError(
                "Cannot create a recognizer from unloaded speaker model"
                f" {self.speaker_model!r}"
            )

        library = native.get_library()
        if isinstance(params, GrammarParams):
            self.handle = library.vosk_recognizer_new_grm(
                self.model.handle,
                self.sample_rate,
                convert_string_to_ptr(params.grammar_json()),
            )
        elif isinstance(params, SpeakerParams):
            self.handle = library.vosk_recognizer_new_spk(
                self.model.handle,
                self.sample_rate,
                self.speaker_model.handle,
            )
        else:
            self.handle = library.vosk_recognizer_new(
                self.model.handle, self.sample_rate
            )

        if not self.handle:
            logger.error(
                f"Native layer failed to create a {type(params).__name__}"
                " recognizer"
            )
        else:
            logger.debug(
                f"Created {type(params).__name__} recognizer at"
                f" {self.sample_rate} Hz"
            )

    @property
    def valid(self) -> bool:
        return bool(self.handle)

    def free(self):
        """Release the native recognizer. No other call is valid afterwards."""
        native.get_library().vosk_recognizer_free(self.handle)

    def set_words(self, words: bool):
        """Include per-word timing and confidence in final results"""
        native.get_library().vosk_recognizer_set_words(self.handle, bool(words))

    def set_partial_words(self, partial_words: bool):
        """Include per-word timing and confidence in partial results"""
        native.get_library().vosk_recognizer_set_partial_words(
            self.handle, bool(partial_words)
        )

    def set_max_alternatives(self, max_alternatives: int):
        """Return up to N alternatives; 0 keeps the single best result"""
        native.get_library().vosk_recognizer_set_max_alternatives(
            self.handle, int(max_alternatives)
        )

    def set_spk_model(self, speaker_model: SpeakerModel):
        native.get_library().vosk_recognizer_set_spk_model(
            self.handle, speaker_model.handle
        )
        self.speaker_model = speaker_model

    def accept_waveform(self, data: Union[bytes, bytearray, memoryview]) -> int:
        """Feed 16-bit little-endian mono PCM.

        Returns nonzero once an utterance boundary is reached and
        ``result()`` holds the finished utterance, zero while the
        utterance is still going (only ``partial_result()`` is meaningful).
        """
        buffer, length = waveform_buffer(data)
        status = native.get_library().vosk_recognizer_accept_waveform(
            self.handle, buffer, length
        )
        logger.debug(f"accept_waveform({length} bytes) -> {status}")
        return status

    def result(self) -> Union[RecognitionResults, SpeakerResults]:
        raw = native.get_library().vosk_recognizer_result(self.handle)
        return parse_result(decode_native_string(raw, "vosk_recognizer_result"))

    def partial_result(self) -> PartialResults:
        raw = native.get_library().vosk_recognizer_partial_result(self.handle)
        return parse_partial_result(
            decode_native_string(raw, "vosk_recognizer_partial_result")
        )

    def final_result(self) -> Union[RecognitionResults, SpeakerResults]:
        """Flush buffered audio and return its result, boundary or not"""
        raw = native.get_library().vosk_recognizer_final_result(self.handle)
        return parse_result(
            decode_native_string(raw, "vosk_recognizer_final_result")
        )

    def reset(self):
        """Drop decoding state and start over as if the stream just began"""
        native.get_library().vosk_recognizer_reset(self.handle)
