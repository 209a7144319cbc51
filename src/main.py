"""
Video headcount: count adults, children and animals in a video.

Plays a local video file, runs an object detector on a grayscale copy of
every displayed frame and publishes per-frame counts of adult-sized
people, child-sized people and animals.

Usage:
    python src/main.py --video clip.mp4 --display

Arguments:
    --config: Path to configuration file
    --video: Video file to analyse
    --display: Show the side-by-side preview window
    --model: Override the detector checkpoint
    --log-level: Override the configured log level
"""

import os
import sys
import argparse
import asyncio
import logging
from typing import Dict, Any, Tuple, Optional

import yaml

from models.config import Config
from models.errors import InvalidMediaError
from ops.logging import setup_logging
from pipeline.engine import LoopState
from runtime.context import RuntimeContext, build_runtime

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        config_dir = os.path.dirname(config_path)
        merged: Dict[str, Any] = {}
        layers = [
            os.path.join(config_dir, "default.yaml"),
            os.path.join(config_dir, "config.yaml"),
            config_path,
        ]
        seen = set()
        for path in layers:
            real = os.path.abspath(path)
            if real in seen or not os.path.exists(path):
                continue
            seen.add(real)
            with open(path, "r") as f:
                merged = _deep_merge(merged, yaml.safe_load(f) or {})
        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['detection', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    detection = config.get('detection') or {}
    if not isinstance(detection.get('model'), str) or not detection.get('model'):
        return False, "detection.model must be a non-empty string"
    for key in ('conf_threshold', 'iou_threshold'):
        if key in detection:
            value = detection[key]
            if not isinstance(value, (int, float)) or not (0 <= value <= 1):
                return False, f"detection.{key} must be a number between 0 and 1"

    classification = config.get('classification') or {}
    if 'child_area_threshold' in classification:
        threshold = classification['child_area_threshold']
        if not isinstance(threshold, (int, float)) or threshold <= 0:
            return False, "classification.child_area_threshold must be a positive number"
    if 'animal_labels' in classification:
        labels = classification['animal_labels']
        if not isinstance(labels, list) or not all(isinstance(x, str) for x in labels):
            return False, "classification.animal_labels must be a list of strings"

    loop = config.get('loop') or {}
    if 'refresh_hz' in loop:
        hz = loop['refresh_hz']
        if not isinstance(hz, (int, float)) or hz <= 0:
            return False, "loop.refresh_hz must be a positive number"

    video = config.get('video') or {}
    if 'allowed_extensions' in video:
        exts = video['allowed_extensions']
        if not isinstance(exts, list) or not all(isinstance(x, str) and x.startswith('.') for x in exts):
            return False, "video.allowed_extensions must be a list like ['.mp4']"

    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


async def run_session(ctx: RuntimeContext, video_path: str) -> int:
    """
    Play one video to the end (or until the user quits) and return an exit code.
    """
    session = ctx.session
    try:
        session.accept_video(video_path)
    except InvalidMediaError as e:
        logging.error(str(e))
        return 2

    window = ctx.window
    if window is not None:
        def show_tick(frame_data, counters):
            window.show(frame_data.frame, ctx.surface.snapshot_bgr(), ctx.board.snapshot())

        ctx.loop.add_callback(show_tick)

    try:
        session.play()
        if window is None:
            # Headless: the loop task ends when playback ends
            if ctx.loop.task is not None:
                await ctx.loop.task
        else:
            await _window_event_loop(ctx)
    finally:
        snapshot = ctx.board.snapshot()
        failed = ctx.loop.state == LoopState.FAILED or bool(snapshot.error)
        logging.info(f"Final counters: {snapshot.counters.as_dict()}")
        session.remove_video()
        if window is not None:
            window.close()

    return 1 if failed else 0


async def _window_event_loop(ctx: RuntimeContext) -> None:
    """Pump preview window keys until the user quits."""
    window = ctx.window
    interval = 1.0 / ctx.config.loop.refresh_hz
    while True:
        action = window.poll_action()
        if action == "quit":
            break
        if action == "toggle":
            ctx.session.toggle_playback()
        elif action == "remove":
            ctx.session.remove_video()

        if not ctx.session.state.video_present or ctx.loop.state == LoopState.FAILED:
            window.show_idle(ctx.board.snapshot())
        await asyncio.sleep(interval)


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Video Headcount - adults, children and animals in video')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--video', type=str, required=True,
                        help='Video file to analyse')
    parser.add_argument('--display', action='store_true',
                        help='Show the side-by-side preview window')
    parser.add_argument('--model', type=str, default=None,
                        help='Detector checkpoint (overrides detection.model)')
    parser.add_argument('--log-level', type=str, default=None, choices=VALID_LOG_LEVELS,
                        help='Override log_level from config')
    args = parser.parse_args()

    raw_config = load_config(args.config)
    if args.model:
        raw_config.setdefault('detection', {})['model'] = args.model
    if args.log_level:
        raw_config['log_level'] = args.log_level

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = Config.from_dict(raw_config)
    setup_logging(config.log_path, config.log_level)
    logging.info("Starting Video Headcount")

    ctx = build_runtime(config, display=args.display or config.display.enabled)
    try:
        exit_code = asyncio.run(run_session(ctx, args.video))
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        exit_code = 130
    logging.info("Video Headcount stopped")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
