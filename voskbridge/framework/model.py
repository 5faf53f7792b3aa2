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
import os
from typing import Optional

from voskbridge.framework import native
from voskbridge.framework.marshal import convert_string_to_ptr

logger = logging.getLogger(__name__)


class _NativeModel:
    """Owner of a single native model handle.

    The handle is released only by an explicit call to ``free()``. After
    that the stored value is left in place and must not be used again;
    this includes recognizers built from the model.
    """

    _new_function = None
    _free_function = None

    def __init__(self, model_path):
        self.model_path = os.fspath(model_path)
        library = native.get_library()
        new = getattr(library, self._new_function)
        self.handle: Optional[int] = new(convert_string_to_ptr(self.model_path))
        if self.handle:
            logger.info(
                f"Loaded {type(self).__name__} from {self.model_path}"
            )
        else:
            logger.error(
                f"Native layer failed to load {type(self).__name__} from"
                f" {self.model_path}"
            )

    @property
    def valid(self) -> bool:
        """True when the native layer returned a non-null handle"""
        return bool(self.handle)

    def free(self):
        getattr(native.get_library(), self._free_function)(self.handle)
        logger.debug(f"Freed {type(self).__name__} {self.model_path}")

    def __repr__(self):
        return f"{type(self).__name__}({self.model_path!r})"


class Model(_NativeModel):
    """Speech recognition model loaded from a model directory"""

    _new_function = "vosk_model_new"
    _free_function = "vosk_model_free"


class SpeakerModel(_NativeModel):
    """Speaker identification model loaded from a model directory"""

    _new_function = "vosk_spk_model_new"
    _free_function = "vosk_spk_model_free"
