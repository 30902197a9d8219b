"""
Replay Rendering Service for Snake Game

This service turns a recorded replay (the JSON written by
GameLoop.save_history_to_json) into an animated GIF by:
1. Rendering each round using PIL (Pillow)
2. Writing the frames as a looping GIF at the configured fps

The rendering mirrors the live canvas:
- Border ring and obstacles in blue
- Food in green
- Snake body in white with a red head
- Score line above the board and the game-over banner on the final frame
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from domain.constants import (
    ENTITY_COLORS,
    FOOD,
    GAME_OVER,
    GAME_OVER_MESSAGE,
    HEAD_COLORS,
    OBSTACLE,
    RESTART_HINT,
    SEGMENT,
)
from services.render_sink import BACKGROUND, TEXT_COLOR, draw_cell, hex_to_rgb

logger = logging.getLogger(__name__)

DEFAULT_FPS = 5
CELL_SIZE = 10
HEADER_HEIGHT = 20


def load_replay(file_path: str) -> Dict[str, Any]:
    """Load replay data from a local JSON file"""
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Replay file not found: {file_path}")

    with open(file_path, 'r') as f:
        return json.load(f)


class ReplayRenderer:
    """Render snake replays to images"""

    def __init__(self, fps: float = DEFAULT_FPS, cell_size: int = CELL_SIZE):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.fps = fps
        self.cell_size = cell_size
        self.font = ImageFont.load_default()

    def _rounds(self, replay_data: Dict[str, Any]) -> List[Dict[str, Any]]:
        rounds = replay_data.get("rounds")
        if not rounds:
            raise ValueError("Replay has no rounds to render")
        return rounds

    def frame_size(self, bounds: Tuple[int, int, int, int]) -> Tuple[int, int]:
        _, max_x, _, max_y = bounds
        return ((max_x + 1) * self.cell_size, (max_y + 1) * self.cell_size + HEADER_HEIGHT)

    def render_frame(self, round_data: Dict[str, Any]) -> Image.Image:
        """Render a single round of the game"""
        bounds = tuple(round_data["bounds"])
        min_x, max_x, min_y, max_y = bounds
        width, height = self.frame_size(bounds)

        img = Image.new('RGB', (width, height), hex_to_rgb(BACKGROUND))
        board = Image.new('RGB', (width, height - HEADER_HEIGHT), hex_to_rgb(BACKGROUND))
        draw = ImageDraw.Draw(board)

        obstacle_stroke, obstacle_fill = ENTITY_COLORS[OBSTACLE]
        for y in (min_y, max_y):
            for x in range(min_x, max_x + 1):
                draw_cell(draw, x, y, self.cell_size, obstacle_stroke, obstacle_fill)
        for x in (min_x, max_x):
            for y in range(min_y + 1, max_y):
                draw_cell(draw, x, y, self.cell_size, obstacle_stroke, obstacle_fill)

        for x, y in round_data.get("obstacles", []):
            draw_cell(draw, x, y, self.cell_size, obstacle_stroke, obstacle_fill)

        food_stroke, food_fill = ENTITY_COLORS[FOOD]
        for x, y in round_data.get("food", []):
            draw_cell(draw, x, y, self.cell_size, food_stroke, food_fill)

        # Body from the tail forwards so the head is drawn last
        snake = round_data.get("snake_positions", [])
        body_stroke, body_fill = ENTITY_COLORS[SEGMENT]
        for x, y in reversed(snake[1:]):
            draw_cell(draw, x, y, self.cell_size, body_stroke, body_fill)
        if snake:
            head_stroke, head_fill = HEAD_COLORS
            draw_cell(draw, snake[0][0], snake[0][1], self.cell_size, head_stroke, head_fill)

        img.paste(board, (0, HEADER_HEIGHT))
        text = ImageDraw.Draw(img)
        text.text(
            (5, 5),
            f"Score: {round_data.get('score', 0)}   Tick: {round_data.get('tick_number', 0)}",
            fill=hex_to_rgb(TEXT_COLOR),
            font=self.font,
        )

        if round_data.get("state") == GAME_OVER:
            for offset, line in ((-10, GAME_OVER_MESSAGE), (10, RESTART_HINT)):
                bbox = text.textbbox((0, 0), line, font=self.font)
                text_width = bbox[2] - bbox[0]
                text.text(
                    (width // 2 - text_width // 2, height // 2 + offset),
                    line,
                    fill=hex_to_rgb(TEXT_COLOR),
                    font=self.font,
                )

        return img

    def render_frames(self, replay_data: Dict[str, Any]) -> List[Image.Image]:
        rounds = self._rounds(replay_data)
        logger.info(f"Rendering {len(rounds)} frames")

        frames = []
        for i, round_data in enumerate(rounds):
            if i % 50 == 0:
                logger.debug(f"Rendering frame {i + 1}/{len(rounds)}")
            frames.append(self.render_frame(round_data))
        return frames

    def render_gif(
        self,
        replay_data: Dict[str, Any],
        output_path: Optional[str] = None
    ) -> str:
        """
        Write the replay as an animated GIF.

        Args:
            replay_data: parsed replay JSON ({"metadata": ..., "rounds": [...]})
            output_path: where to write; defaults to <game_id>_replay.gif

        Returns:
            Path to the written GIF
        """
        frames = self.render_frames(replay_data)

        if output_path is None:
            game_id = replay_data.get("metadata", {}).get("game_id", "snake")
            output_path = f"{game_id}_replay.gif"

        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)

        frames[0].save(
            output_path,
            save_all=True,
            append_images=frames[1:],
            duration=int(1000 / self.fps),
            loop=0,
        )

        logger.info(f"Replay GIF written to {output_path}")
        return output_path
