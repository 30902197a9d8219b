#!/usr/bin/env python3
"""
CLI tool to render snake replays as animated GIFs

Usage:
    python render_replay.py <path_to_replay.json>

Examples:
    # Render next to the replay
    python render_replay.py completed_games/snake_game_xyz.json

    # Custom output path
    python render_replay.py completed_games/snake_game_xyz.json --output ./replay.gif

    # Custom playback settings
    python render_replay.py completed_games/snake_game_xyz.json --fps 10 --cell-size 12
"""

import os
import sys
import argparse
import logging

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.replay_renderer import ReplayRenderer, load_replay  # noqa: E402
from dotenv import load_dotenv  # noqa: E402

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def default_output_path(replay_path: str) -> str:
    root, _ = os.path.splitext(replay_path)
    return f"{root}.gif"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Render a snake replay JSON file as an animated GIF'
    )
    parser.add_argument('replay', type=str, help='Path to the replay JSON file')
    parser.add_argument('--output', type=str, help='Output GIF path (default: next to the replay)')
    parser.add_argument('--fps', type=float, default=float(os.getenv('SNAKE_FPS', 5)),
                        help='Playback frames per second')
    parser.add_argument('--cell-size', type=int, default=10, help='Pixels per grid cell')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        replay_data = load_replay(args.replay)
        logger.info(f"Loaded replay with {len(replay_data.get('rounds', []))} rounds")

        renderer = ReplayRenderer(fps=args.fps, cell_size=args.cell_size)
        output_path = renderer.render_gif(
            replay_data,
            output_path=args.output or default_output_path(args.replay)
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not render replay: {e}")
        return 1

    logger.info(f"Replay rendered to {output_path}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
