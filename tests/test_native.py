import ctypes
import types
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from voskbridge import set_log_level
from voskbridge.framework import native, platform_utils
from voskbridge.framework.errors import NativeLibraryError


def fake_cdll(missing=()):
    return types.SimpleNamespace(
        **{
            name: MagicMock(name=name)
            for name in native.SIGNATURES
            if name not in missing
        }
    )


def test_signature_table_covers_every_entry_point():
    assert set(native.SIGNATURES) == {
        "vosk_set_log_level",
        "vosk_model_new",
        "vosk_model_free",
        "vosk_spk_model_new",
        "vosk_spk_model_free",
        "vosk_recognizer_new",
        "vosk_recognizer_new_spk",
        "vosk_recognizer_new_grm",
        "vosk_recognizer_free",
        "vosk_recognizer_set_max_alternatives",
        "vosk_recognizer_set_words",
        "vosk_recognizer_set_partial_words",
        "vosk_recognizer_set_spk_model",
        "vosk_recognizer_accept_waveform",
        "vosk_recognizer_result",
        "vosk_recognizer_final_result",
        "vosk_recognizer_partial_result",
        "vosk_recognizer_reset",
    }


def test_bind_symbols_declares_types():
    library = native.bind_symbols(fake_cdll())

    accept = library.vosk_recognizer_accept_waveform
    assert accept.argtypes == [ctypes.c_void_p, ctypes.c_char_p, ctypes.c_int]
    assert accept.restype is ctypes.c_int
    assert library.vosk_recognizer_new.argtypes == [
        ctypes.c_void_p,
        ctypes.c_float,
    ]
    assert library.vosk_recognizer_set_words.argtypes[1] is ctypes.c_bool
    assert library.vosk_recognizer_result.restype is ctypes.c_char_p
    assert library.vosk_model_free.restype is None


def test_bind_symbols_missing_symbol_is_fatal():
    with pytest.raises(NativeLibraryError, match="vosk_recognizer_new_grm"):
        native.bind_symbols(fake_cdll(missing={"vosk_recognizer_new_grm"}))


def test_load_library_missing_file(tmp_path):
    with pytest.raises(NativeLibraryError, match="not found"):
        native.load_library(tmp_path / "libvosk.so")


def test_load_library_invalid_file(tmp_path):
    bogus = tmp_path / "libvosk.so"
    bogus.write_bytes(b"not a shared library")

    with pytest.raises(NativeLibraryError, match="Could not load"):
        native.load_library(bogus)


def test_native_library_error_is_an_os_error():
    assert issubclass(NativeLibraryError, OSError)


def test_find_library_path_defaults_to_package_lib(monkeypatch, config_manager):
    monkeypatch.delenv("VOSKBRIDGE_LIBRARY", raising=False)
    monkeypatch.setattr(platform_utils.platform, "system", lambda: "Darwin")

    path = native.find_library_path(config_manager)

    assert path.name == "libvosk.dylib"
    assert path.parent.name == "lib"
    assert path.parent.parent.name == "voskbridge"


@pytest.mark.parametrize(
    "system, suffix", [("Linux", "so"), ("Windows", "dll"), ("Darwin", "dylib")]
)
def test_library_suffix(monkeypatch, system, suffix):
    monkeypatch.setattr(platform_utils.platform, "system", lambda: system)
    assert platform_utils.get_library_filename() == f"libvosk.{suffix}"


def test_find_library_path_from_config(monkeypatch, config_manager):
    monkeypatch.delenv("VOSKBRIDGE_LIBRARY", raising=False)
    config_manager.values["library.path"] = "/opt/vosk/libvosk.so"

    assert native.find_library_path(config_manager) == Path(
        "/opt/vosk/libvosk.so"
    )


def test_find_library_path_env_wins(monkeypatch, config_manager):
    monkeypatch.setenv("VOSKBRIDGE_LIBRARY", "/env/libvosk.so")
    config_manager.values["library.path"] = "/opt/vosk/libvosk.so"

    assert native.find_library_path(config_manager) == Path("/env/libvosk.so")


def test_get_library_loads_once(monkeypatch):
    monkeypatch.setattr(native, "_library", None)
    monkeypatch.setattr(native, "_load_error", None)
    loaded = MagicMock(name="libvosk")
    library_path = Path("/opt/vosk/libvosk.so")

    with patch.object(
        native, "find_library_path", return_value=library_path
    ), patch.object(native, "load_library", return_value=loaded) as load:
        assert native.get_library() is loaded
        assert native.get_library() is loaded

    load.assert_called_once_with(library_path)
    loaded.vosk_set_log_level.assert_not_called()


def test_get_library_applies_configured_log_level(monkeypatch, config_manager):
    monkeypatch.setattr(native, "_library", None)
    monkeypatch.setattr(native, "_load_error", None)
    config_manager.values["library.log_level"] = -1
    loaded = MagicMock(name="libvosk")

    with patch("voskbridge.framework.config.config", config_manager), \
            patch.object(native, "find_library_path"), \
            patch.object(native, "load_library", return_value=loaded):
        native.get_library()

    loaded.vosk_set_log_level.assert_called_once_with(-1)


def test_get_library_failure_is_not_retried(monkeypatch):
    monkeypatch.setattr(native, "_library", None)
    monkeypatch.setattr(native, "_load_error", None)
    error = NativeLibraryError("Native library not found")

    with patch.object(native, "find_library_path"), patch.object(
        native, "load_library", side_effect=error
    ) as load:
        for _ in range(3):
            with pytest.raises(NativeLibraryError) as excinfo:
                native.get_library()
            assert excinfo.value is error

    load.assert_called_once()
    assert native._library is None


def test_set_log_level(fake_library):
    set_log_level(-1)
    fake_library.vosk_set_log_level.assert_called_once_with(-1)
