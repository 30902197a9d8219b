"""
Render sinks: where the game engine sends drawing notifications.

The engine only ever reports logical cells (id, x, y, colours) plus score
and banner text. Pixel geometry belongs to the sink.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

DEFAULT_CELL_SIZE = 10
BACKGROUND = "#000000"
TEXT_COLOR = "#ffffff"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple"""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) == 3:
        hex_color = ''.join(c * 2 for c in hex_color)
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def draw_cell(
    draw: ImageDraw.ImageDraw,
    x: int,
    y: int,
    cell_size: int,
    stroke: str,
    fill: str,
):
    """Draw one grid cell as a square one pixel smaller than the cell."""
    left = x * cell_size
    top = y * cell_size
    draw.rectangle(
        [left, top, left + cell_size - 2, top + cell_size - 2],
        fill=hex_to_rgb(fill),
        outline=hex_to_rgb(stroke),
    )


class RenderSink:
    """
    Base class/interface for render sinks. Every notification is a no-op
    here, so the engine can run headless with a bare RenderSink.
    """

    def draw_cell(self, entity_id: int, x: int, y: int, stroke: str, fill: str):
        pass

    def move_cell(self, entity_id: int, x: int, y: int):
        pass

    def hide_cell(self, entity_id: int):
        pass

    def show_score(self, score: int):
        pass

    def show_banner(self, title: str, subtitle: str):
        pass

    def clear(self):
        pass


@dataclass
class Cell:
    x: int
    y: int
    stroke: str
    fill: str
    visible: bool = True


class CanvasRenderSink(RenderSink):
    """
    Keeps an in-memory table of every drawn cell so the current screen can
    be rasterised with Pillow at any time.
    """

    def __init__(self, cell_size: int = DEFAULT_CELL_SIZE):
        self.cell_size = cell_size
        self.cells: Dict[int, Cell] = {}
        self.score_text = ""
        self.banner: Optional[Tuple[str, str]] = None

    def draw_cell(self, entity_id, x, y, stroke, fill):
        self.cells[entity_id] = Cell(x, y, stroke, fill)

    def move_cell(self, entity_id, x, y):
        cell = self.cells.get(entity_id)
        if cell is None:
            logger.warning(f"move_cell for unknown entity {entity_id}")
            return
        cell.x = x
        cell.y = y

    def hide_cell(self, entity_id):
        cell = self.cells.get(entity_id)
        if cell is not None:
            cell.visible = False

    def show_score(self, score):
        self.score_text = f"Score: {score}"

    def show_banner(self, title, subtitle):
        self.banner = (title, subtitle)

    def clear(self):
        self.cells.clear()
        self.score_text = ""
        self.banner = None

    def visible_cells(self):
        return [cell for cell in self.cells.values() if cell.visible]

    def to_image(self, width: Optional[int] = None, height: Optional[int] = None) -> Image.Image:
        """Rasterise the current screen."""
        visible = self.visible_cells()
        if width is None:
            width = (max((c.x for c in visible), default=0) + 1) * self.cell_size
        if height is None:
            height = (max((c.y for c in visible), default=0) + 1) * self.cell_size

        img = Image.new('RGB', (width, height), hex_to_rgb(BACKGROUND))
        draw = ImageDraw.Draw(img)

        for cell in visible:
            draw_cell(draw, cell.x, cell.y, self.cell_size, cell.stroke, cell.fill)

        font = ImageFont.load_default()
        if self.score_text:
            draw.text((5, 5), self.score_text, fill=hex_to_rgb(TEXT_COLOR), font=font)

        if self.banner:
            title, subtitle = self.banner
            for offset, text in ((-10, title), (10, subtitle)):
                bbox = draw.textbbox((0, 0), text, font=font)
                text_width = bbox[2] - bbox[0]
                draw.text(
                    (width // 2 - text_width // 2, height // 2 + offset),
                    text,
                    fill=hex_to_rgb(TEXT_COLOR),
                    font=font,
                )

        return img
