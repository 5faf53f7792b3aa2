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
Loader for the libvosk shared library.

The library is opened once per process, on first use, and never unloaded.
Every entry point used by the binding is declared in ``SIGNATURES``; a
missing symbol makes loading fail as a whole.
"""

import ctypes
import logging
import os
import platform
import threading
from pathlib import Path

from voskbridge.framework.errors import NativeLibraryError
from voskbridge.framework.platform_utils import (
    get_default_library_dir,
    get_library_filename,
)

logger = logging.getLogger(__name__)

c_handle = ctypes.c_void_p

# name: (argtypes, restype)
SIGNATURES = {
    "vosk_set_log_level": ([ctypes.c_int], None),
    "vosk_model_new": ([ctypes.c_char_p], c_handle),
    "vosk_model_free": ([c_handle], None),
    "vosk_spk_model_new": ([ctypes.c_char_p], c_handle),
    "vosk_spk_model_free": ([c_handle], None),
    "vosk_recognizer_new": ([c_handle, ctypes.c_float], c_handle),
    "vosk_recognizer_new_spk": (
        [c_handle, ctypes.c_float, c_handle],
        c_handle,
    ),
    "vosk_recognizer_new_grm": (
        [c_handle, ctypes.c_float, ctypes.c_char_p],
        c_handle,
    ),
    "vosk_recognizer_free": ([c_handle], None),
    "vosk_recognizer_set_max_alternatives": ([c_handle, ctypes.c_int], None),
    "vosk_recognizer_set_words": ([c_handle, ctypes.c_bool], None),
    "vosk_recognizer_set_partial_words": ([c_handle, ctypes.c_bool], None),
    "vosk_recognizer_set_spk_model": ([c_handle, c_handle], None),
    "vosk_recognizer_accept_waveform": (
        [c_handle, ctypes.c_char_p, ctypes.c_int],
        ctypes.c_int,
    ),
    "vosk_recognizer_result": ([c_handle], ctypes.c_char_p),
    "vosk_recognizer_final_result": ([c_handle], ctypes.c_char_p),
    "vosk_recognizer_partial_result": ([c_handle], ctypes.c_char_p),
    "vosk_recognizer_reset": ([c_handle], None),
}

_library = None
_load_error = None
_dll_directory = None
_lock = threading.Lock()


def find_library_path(config_manager=None) -> Path:
    """Resolve the libvosk path.

    Priority: VOSKBRIDGE_LIBRARY env var, ``library.path`` config key,
    then the ``lib`` directory shipped inside the package.
    """
    env_path = os.environ.get("VOSKBRIDGE_LIBRARY")
    if env_path:
        return Path(os.path.expanduser(env_path))

    if config_manager is None:
        from voskbridge.framework.config import config as config_manager

    configured = config_manager.get("library.path")
    if configured:
        return Path(os.path.expanduser(configured))

    return get_default_library_dir() / get_library_filename()


def bind_symbols(library):
    """Declare argument and return types for every entry point"""
    for name, (argtypes, restype) in SIGNATURES.items():
        try:
            function = getattr(library, name)
        except AttributeError as e:
            raise NativeLibraryError(
                f"Symbol {name} not found in native library"
            ) from e
        function.argtypes = argtypes
        function.restype = restype
    return library


def load_library(path) -> ctypes.CDLL:
    """Open the shared library at ``path`` and bind its entry points"""
    global _dll_directory

    path = Path(path)
    if not path.exists():
        raise NativeLibraryError(f"Native library not found: {path}")

    if platform.system() == "Windows":
        # Dependent DLLs (libgcc, libstdc++...) live next to libvosk
        _dll_directory = os.add_dll_directory(str(path.parent))

    try:
        library = ctypes.CDLL(str(path))
    except OSError as e:
        raise NativeLibraryError(
            f"Could not load native library {path}: {e}"
        ) from e

    logger.info(f"Loaded native library from {path}")
    return bind_symbols(library)


def get_library():
    """Return the process-wide function table, loading it on first use

    A failed load is remembered and raised again on every later call.
    """
    global _library, _load_error

    if _library is not None:
        return _library

    with _lock:
        if _load_error is not None:
            raise _load_error
        if _library is None:
            from voskbridge.framework.config import config as config_manager

            try:
                library = load_library(find_library_path(config_manager))
            except NativeLibraryError as e:
                _load_error = e
                raise
            log_level = config_manager.get("library.log_level")
            if log_level is not None:
                library.vosk_set_log_level(int(log_level))
            _library = library
    return _library


def set_log_level(level: int):
    """Set the native log level for the whole process.

    Negative values silence the library, 0 is the default, higher values
    are more verbose.
    """
    get_library().vosk_set_log_level(int(level))
