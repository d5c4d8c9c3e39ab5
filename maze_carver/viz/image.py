import logging

import numpy as np
import pygame

from maze_carver.core.errors import RenderSettingsError
from maze_carver.core.grid import Grid

logger = logging.getLogger(__name__)


class MazeImageRenderer:
    COLOR_BG = (255, 255, 255)
    COLOR_WALL = (0, 0, 0)
    COLOR_START = (255, 0, 0)
    COLOR_END = (0, 0, 255)

    def __init__(self, grid: Grid, cell_size: int = 10, stroke: int = 3):
        self.validate_settings(cell_size, stroke)
        self.grid = grid
        self.cell_size = cell_size
        self.stroke = stroke

    @staticmethod
    def validate_settings(cell_size: int, stroke: int = 3):
        if cell_size < 2:
            raise RenderSettingsError(f"cell_size must be at least 2, got {cell_size}")
        if stroke < 1:
            raise RenderSettingsError(f"stroke must be at least 1, got {stroke}")

    @property
    def size(self):
        return (self.grid.width * self.cell_size + 1, self.grid.height * self.cell_size + 1)

    def render(self) -> pygame.Surface:
        """Draws every closed wall, the border and the start/end markers onto a new Surface."""
        grid = self.grid
        cs = self.cell_size
        surface = pygame.Surface(self.size)
        surface.fill(self.COLOR_BG)

        # Vertical segments: wall between (x, y) and (x + 1, y)
        for x in range(grid.width - 1):
            for y in range(grid.height):
                if grid.has_wall(x, y, Grid.EAST):
                    px, py = x * cs + cs, y * cs
                    pygame.draw.line(surface, self.COLOR_WALL, (px, py), (px, py + cs), self.stroke)

        # Horizontal segments: wall between (x, y) and (x, y + 1)
        for y in range(grid.height - 1):
            for x in range(grid.width):
                if grid.has_wall(x, y, Grid.SOUTH):
                    px, py = x * cs, y * cs + cs
                    pygame.draw.line(surface, self.COLOR_WALL, (px, py), (px + cs, py), self.stroke)

        # Outer border
        pygame.draw.rect(surface, self.COLOR_WALL, (0, 0, *self.size), self.stroke)

        w, h = self.size
        pygame.draw.rect(surface, self.COLOR_START, (1, 1, cs - 1, cs - 1))
        pygame.draw.rect(surface, self.COLOR_END, (w - cs, h - cs, cs - 1, cs - 1))
        return surface

    def to_array(self) -> np.ndarray:
        # array3d is (width, height, 3); callers expect (height, width, 3)
        view = pygame.surfarray.array3d(self.render())
        return np.transpose(view, (1, 0, 2))

    def save(self, path: str):
        pygame.image.save(self.render(), path)
        logger.info("Saved %dx%d image to %s", *self.size, path)
