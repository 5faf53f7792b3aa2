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

import argparse
import json
import os
import sys

from voskbridge import __version__
from voskbridge.framework.config import config
from voskbridge.framework.errors import VoskBridgeError
from voskbridge.framework.logging_setup import logging_manager
from voskbridge.framework.native import set_log_level
from voskbridge.framework.stt.vosk import VoskSTT


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="voskbridge-transcribe",
        description="Transcribe a 16-bit mono WAV file with libvosk",
    )
    parser.add_argument("audio_file", help="Path to the WAV file")
    parser.add_argument(
        "--model", required=True, help="Path to the Vosk model directory"
    )
    parser.add_argument(
        "--spk-model", default=None, help="Path to a speaker model directory"
    )
    parser.add_argument(
        "--grammar",
        nargs="+",
        default=None,
        help="Restrict recognition to these phrases",
    )
    parser.add_argument(
        "--words",
        action="store_true",
        help="Include per-word timings in results",
    )
    parser.add_argument(
        "--max-alternatives",
        type=int,
        default=None,
        help="Number of alternative transcripts to return",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=config.get("logging.level", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--native-log-level",
        type=int,
        default=None,
        help="libvosk log level, negative values silence it",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger = logging_manager.setup(
        log_dir=config.get_log_directory(), log_level=args.log_level
    )

    if args.spk_model and args.grammar:
        logger.error("--grammar and --spk-model cannot be used together")
        return 2
    if not os.path.exists(args.audio_file):
        logger.error(f"File {args.audio_file} does not exist")
        return 1

    if args.words:
        config.set("recognizer.words", True)
    if args.max_alternatives is not None:
        config.set("recognizer.max_alternatives", args.max_alternatives)

    try:
        if args.native_log_level is not None:
            set_log_level(args.native_log_level)
        stt_config = {"model_path": args.model}
        if args.spk_model:
            stt_config["spk_model_path"] = args.spk_model
        if args.grammar:
            stt_config["grammar"] = args.grammar

        with VoskSTT(stt_config, config_manager=config) as stt:
            for event in stt.transcribe_file_events(args.audio_file):
                if not event.is_final:
                    continue
                print(json.dumps(event.data, ensure_ascii=False))
    except (VoskBridgeError, ValueError) as e:
        logger.error(f"Transcription failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
