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
Schemas for the JSON documents returned by the recognizer.

Three shapes exist: the partial result, the recognition result and the
recognition result augmented with a speaker embedding. Speaker fields
are validated whenever they appear; libvosk omits them for utterances
too short to compute an embedding.
"""

import json
from typing import Any, Dict, List, TypedDict, Union

from jsonschema import Draft7Validator

from voskbridge.framework.errors import ResultParseError


class WordResult(TypedDict):
    conf: float
    start: float
    end: float
    word: str


class RecognitionResults(TypedDict, total=False):
    text: str
    result: List[WordResult]
    alternatives: List[Dict[str, Any]]


class SpeakerResults(RecognitionResults):
    spk: List[float]
    spk_frames: int


class PartialResults(TypedDict, total=False):
    partial: str
    partial_result: List[WordResult]


WORD_SCHEMA = {
    "type": "object",
    "properties": {
        "conf": {"type": "number"},
        "start": {"type": "number"},
        "end": {"type": "number"},
        "word": {"type": "string"},
    },
    "required": ["word", "start", "end"],
}

PARTIAL_RESULT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "partial": {"type": "string"},
        "partial_result": {"type": "array", "items": WORD_SCHEMA},
    },
    "required": ["partial"],
}

ALTERNATIVE_SCHEMA = {
    "type": "object",
    "properties": {
        "text": {"type": "string"},
        "confidence": {"type": "number"},
        "result": {"type": "array", "items": WORD_SCHEMA},
    },
    "required": ["text"],
}

RECOGNITION_RESULT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "text": {"type": "string"},
        "result": {"type": "array", "items": WORD_SCHEMA},
        "alternatives": {"type": "array", "items": ALTERNATIVE_SCHEMA},
        "spk": {"type": "array", "items": {"type": "number"}},
        "spk_frames": {"type": "integer", "minimum": 0},
    },
    "anyOf": [{"required": ["text"]}, {"required": ["alternatives"]}],
    "dependencies": {
        "spk": ["spk_frames"],
        "spk_frames": ["spk"],
    },
}

_partial_validator = Draft7Validator(PARTIAL_RESULT_SCHEMA)
_result_validator = Draft7Validator(RECOGNITION_RESULT_SCHEMA)


def _parse(text: str, validator: Draft7Validator, kind: str):
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResultParseError(
            f"Native {kind} is not valid JSON: {e}", raw_text=text
        ) from e

    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        details = "; ".join(
            f"{'.'.join(map(str, e.path)) or 'root'}: {e.message}"
            for e in errors
        )
        raise ResultParseError(
            f"Native {kind} does not match schema: {details}", raw_text=text
        )
    return data


def parse_result(text: str) -> Union[RecognitionResults, SpeakerResults]:
    """Parse a (final) recognition result, speaker fields included"""
    return _parse(text, _result_validator, "result")


def parse_partial_result(text: str) -> PartialResults:
    return _parse(text, _partial_validator, "partial result")


def has_speaker_data(result: RecognitionResults) -> bool:
    """True when the result carries a speaker embedding"""
    return "spk" in result and "spk_frames" in result
