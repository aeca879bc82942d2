"""
Replay entry point.

Feeds recorded frames through an analysis session and prints one JSON
result per frame. Input is JSON Lines, one frame per line:

    {"timestamp": 0.033, "keypoints": [x0, y0, c0, x1, y1, c1, ...]}

Usage:
    python -m repcoach.main frames.jsonl --exercise squat
    python -m repcoach.main --list
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from repcoach.config import get_settings
from repcoach.cv.exercise_analyzer import ExerciseAnalyzer, supported_exercises
from repcoach.exceptions import InputShapeError
from repcoach.schemas.analysis import FrameAnalysisResponse

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repcoach",
        description=f"{settings.app_name}: replay recorded keypoint frames",
    )
    parser.add_argument("frames", nargs="?", help="JSON Lines file of frames ('-' for stdin)")
    parser.add_argument("-e", "--exercise", help="Exercise id from the catalog")
    parser.add_argument("--reps-only", action="store_true", help="Only print frames that complete a rep")
    parser.add_argument("--list", action="store_true", help="List supported exercises and exit")
    return parser


def replay(lines, analyzer: ExerciseAnalyzer, reps_only: bool = False) -> int:
    """Run every frame through the analyzer; returns the number of skipped frames."""
    skipped = 0
    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            frame = json.loads(line)
            result = analyzer.process_frame(frame["keypoints"], float(frame["timestamp"]))
        except (json.JSONDecodeError, InputShapeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Line {line_number}: skipped ({e})")
            skipped += 1
            continue

        if reps_only and not result.rep_completed:
            continue
        print(FrameAnalysisResponse.from_analysis(result).model_dump_json())
    return skipped


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list:
        for exercise_id in supported_exercises():
            print(exercise_id)
        return 0

    if not args.frames or not args.exercise:
        logger.error("Both a frames file and --exercise are required")
        return 2

    analyzer = ExerciseAnalyzer(args.exercise)
    logger.info(f"Replaying {args.frames} as {args.exercise}")

    if args.frames == "-":
        skipped = replay(sys.stdin, analyzer, args.reps_only)
    else:
        with open(args.frames, encoding="utf-8") as f:
            skipped = replay(f, analyzer, args.reps_only)

    logger.info(
        f"Done: {analyzer.rep_count} reps over {analyzer.frame_number} frames"
        + (f", {skipped} skipped" if skipped else "")
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
