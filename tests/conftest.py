import os
import wave
from unittest.mock import MagicMock, patch

import pytest

# Keep the shared ConfigManager away from any user configuration
os.environ["VOSKBRIDGE_CONFIG"] = os.path.join(
    os.path.dirname(__file__), "missing-voskbridge.yaml"
)

from voskbridge.framework import native  # noqa: E402

MODEL_HANDLE = 0x1001
SPK_MODEL_HANDLE = 0x2001
RECOGNIZER_HANDLE = 0x3001
SPK_RECOGNIZER_HANDLE = 0x3002
GRM_RECOGNIZER_HANDLE = 0x3003


@pytest.fixture
def fake_library():
    """A MagicMock standing in for the loaded libvosk function table"""
    library = MagicMock(name="libvosk")
    library.vosk_model_new.return_value = MODEL_HANDLE
    library.vosk_spk_model_new.return_value = SPK_MODEL_HANDLE
    library.vosk_recognizer_new.return_value = RECOGNIZER_HANDLE
    library.vosk_recognizer_new_spk.return_value = SPK_RECOGNIZER_HANDLE
    library.vosk_recognizer_new_grm.return_value = GRM_RECOGNIZER_HANDLE
    library.vosk_recognizer_accept_waveform.return_value = 0
    library.vosk_recognizer_result.return_value = b'{"text" : ""}'
    library.vosk_recognizer_partial_result.return_value = b'{"partial" : ""}'
    library.vosk_recognizer_final_result.return_value = b'{"text" : ""}'
    with patch.object(native, "_library", library):
        yield library


@pytest.fixture
def config_manager():
    """Config stand-in returning the bundled defaults"""
    values = {
        "recognizer.sample_rate": 16000,
        "recognizer.words": False,
        "recognizer.partial_words": False,
        "recognizer.max_alternatives": 0,
        "stt.chunk_frames": 4000,
    }
    manager = MagicMock()
    manager.get.side_effect = lambda key, default=None: values.get(key, default)
    manager.values = values
    return manager


def write_wave(path, frames=b"\x00\x00" * 16000, channels=1, width=2,
               rate=16000):
    with wave.open(str(path), "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(width)
        wf.setframerate(rate)
        wf.writeframes(frames)
    return path


@pytest.fixture
def make_wave(tmp_path):
    def factory(name="audio.wav", **kwargs):
        return write_wave(tmp_path / name, **kwargs)
    return factory


@pytest.fixture
def silence_wav(make_wave):
    return make_wave("silence.wav")
