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

import os
import platform
from pathlib import Path

LIBRARY_BASENAME = "libvosk"


def get_default_config_paths():
    """Get list of default platform-specific configuration file paths"""
    system = platform.system()
    config_paths = []

    if system == "Linux" or system == "Darwin":  # Linux or macOS
        # XDG standard for Linux, similar location for macOS
        config_home = os.environ.get(
            "XDG_CONFIG_HOME", os.path.expanduser("~/.config")
        )
        config_paths.extend([
            Path(config_home) / "voskbridge/voskbridge.yaml",
            Path("/etc/voskbridge/voskbridge.yaml"),
        ])
    elif system == "Windows":
        appdata = os.environ.get(
            "APPDATA", os.path.expanduser("~/AppData/Roaming")
        )
        config_paths.append(Path(appdata) / "VoskBridge/voskbridge.yaml")
    else:
        # Fallback for other systems
        config_paths.append(
            Path(os.path.expanduser("~/.voskbridge/voskbridge.yaml"))
        )

    # Add current directory as last resort for development environments
    config_paths.append(Path("config/voskbridge.yaml"))
    return config_paths


def get_library_suffix():
    """Shared library extension used by the current platform"""
    system = platform.system()
    if system == "Windows":
        return "dll"
    elif system == "Darwin":
        return "dylib"
    return "so"


def get_library_filename():
    return f"{LIBRARY_BASENAME}.{get_library_suffix()}"


def get_default_library_dir():
    """Directory bundled with the package that holds the native library"""
    return Path(__file__).resolve().parent.parent / "lib"
