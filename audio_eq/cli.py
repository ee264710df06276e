"""
Minimal CLI entrypoint for equalizing files without opening the GUI.
"""

from __future__ import annotations
import argparse
import logging
import sys
import soundfile as sf

from audio_eq.core.errors import AudioEqError, DecodeError
from audio_eq.core.filter_spec import REFERENCE_CURVE, sort_by_frequency
from audio_eq.core.pipeline import process_file
from audio_eq.utils.formatting import format_audio_summary, format_filter


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="audio-eq",
        description="Apply the EQ curve to an audio file and export 16-bit PCM WAV.",
    )
    ap.add_argument("input", help="Input audio file (WAV, MP3, OGG, AAC, M4A, FLAC, WebM)")
    ap.add_argument("-o", "--out", default=None, help="Output path (default: <name>-EQ<ext>)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for config in sort_by_frequency(REFERENCE_CURVE):
        logger.debug("Filter: %s", format_filter(config))

    try:
        target = process_file(args.input, args.out)
    except OSError as e:
        # missing input or unwritable output
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    except DecodeError as e:
        logger.debug("Decode failure", exc_info=e)
        print("[ERROR] Invalid audio format.", file=sys.stderr)
        return 1
    except AudioEqError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    info = sf.info(str(target))
    summary = format_audio_summary(info.channels, info.samplerate, info.duration)
    print(f"[OK] Wrote: {target.resolve()} ({summary})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
