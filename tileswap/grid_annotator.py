"""Drawing of grid lines, coordinates and tile highlights."""

import numpy as np
from PIL import Image, ImageDraw, ImageFont
from typing import Optional, Sequence

CORRECT_COLOR = (60, 200, 90)
SELECTED_COLOR = (255, 200, 0)
GRID_LINE_COLOR = (128, 128, 128)


class GridAnnotator:
    """Adds visual cues to tiles and board images for the player."""

    def __init__(self, grid_size: int):
        """
        Initialize the grid annotator.

        Args:
            grid_size: Size of the grid (e.g., 3 for 3x3)
        """
        self.grid_size = grid_size

    def _get_font(self, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        """Get a font for drawing text, with fallback."""
        for candidate in (
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
            "arial.ttf",
        ):
            try:
                return ImageFont.truetype(candidate, size)
            except (OSError, IOError):
                continue
        return ImageFont.load_default()

    @staticmethod
    def _draw_frame(
        draw: ImageDraw.ImageDraw,
        box: tuple[int, int, int, int],
        color: tuple[int, int, int],
        border_width: int,
    ) -> None:
        """Draw a rectangular frame inside box, shrinking it for tiny cells."""
        x1, y1, x2, y2 = box
        effective_border = max(1, min(border_width, (x2 - x1) // 2, (y2 - y1) // 2))
        for i in range(effective_border):
            if x1 + i < x2 - i and y1 + i < y2 - i:
                draw.rectangle([x1 + i, y1 + i, x2 - i, y2 - i], outline=color)

    def annotate_tile(
        self,
        content: np.ndarray,
        correct: bool = False,
        selected: bool = False,
        border_width: int = 4,
    ) -> np.ndarray:
        """
        Frame a single tile.

        Selected tiles get a gold frame, tiles in their correct slot a green
        one. Selection wins when both apply.

        Args:
            content: Tile image as numpy array (H, W, 3)
            correct: Whether the tile is in its correct slot
            selected: Whether the tile is armed for a swap
            border_width: Frame width in pixels

        Returns:
            Framed copy of the tile
        """
        if not (correct or selected):
            return content.copy()

        pil_image = Image.fromarray(content)
        draw = ImageDraw.Draw(pil_image)
        h, w = content.shape[:2]
        color = SELECTED_COLOR if selected else CORRECT_COLOR
        self._draw_frame(draw, (0, 0, w - 1, h - 1), color, border_width)
        return np.array(pil_image)

    def annotate_board(
        self,
        image: np.ndarray,
        correctness: Optional[Sequence[bool]] = None,
        show_labels: bool = True,
        border_width: int = 2,
    ) -> np.ndarray:
        """
        Add grid lines, coordinate labels and correct-tile frames to a board image.

        Args:
            image: Board image as numpy array (H, W, 3)
            correctness: Optional correct-slot flag per position (row-major)
            show_labels: Whether to write "row,col" in each cell
            border_width: Width of grid lines

        Returns:
            Annotated image as numpy array
        """
        h, w = image.shape[:2]
        piece_h = h // self.grid_size
        piece_w = w // self.grid_size

        pil_image = Image.fromarray(image.copy())
        draw = ImageDraw.Draw(pil_image)

        self._draw_grid_lines(draw, piece_h, piece_w, h, w, border_width)

        if correctness is not None:
            for position, correct in enumerate(correctness):
                if not correct:
                    continue
                row, col = divmod(position, self.grid_size)
                x1 = col * piece_w
                y1 = row * piece_h
                self._draw_frame(
                    draw, (x1, y1, x1 + piece_w - 1, y1 + piece_h - 1), CORRECT_COLOR, border_width + 1
                )

        if show_labels:
            self._draw_cell_labels(draw, piece_h, piece_w)

        return np.array(pil_image)

    def _draw_grid_lines(
        self,
        draw: ImageDraw.ImageDraw,
        piece_h: int,
        piece_w: int,
        total_h: int,
        total_w: int,
        border_width: int
    ) -> None:
        """Draw simple grid lines."""
        for i in range(self.grid_size + 1):
            y = i * piece_h
            draw.line([(0, y), (total_w, y)], fill=GRID_LINE_COLOR, width=border_width)

        for j in range(self.grid_size + 1):
            x = j * piece_w
            draw.line([(x, 0), (x, total_h)], fill=GRID_LINE_COLOR, width=border_width)

    def _draw_cell_labels(
        self,
        draw: ImageDraw.ImageDraw,
        piece_h: int,
        piece_w: int,
        text_color: tuple[int, int, int] = (255, 255, 255),
        bg_color: tuple[int, int, int] = (0, 0, 0),
    ) -> None:
        """Draw coordinate labels in each cell corner."""
        font_size = max(8, min(piece_h // 6, piece_w // 4, 16))
        font = self._get_font(font_size)

        for row in range(self.grid_size):
            for col in range(self.grid_size):
                label = f"{row + 1},{col + 1}"

                x = col * piece_w + 2
                y = row * piece_h + 2

                bbox = draw.textbbox((0, 0), label, font=font)
                text_w = bbox[2] - bbox[0]
                text_h = bbox[3] - bbox[1]

                padding = 2
                draw.rectangle(
                    [x, y, x + text_w + padding * 2, y + text_h + padding * 2],
                    fill=bg_color,
                )
                draw.text((x + padding, y + padding), label, fill=text_color, font=font)
