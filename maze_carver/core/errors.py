class MazeError(Exception):
    """Base class for every error raised by maze_carver."""


class InvalidDimensionsError(MazeError, ValueError):
    def __init__(self, width, height):
        super().__init__(
            f"Grid dimensions must be positive integers, got width={width!r}, height={height!r}"
        )
        self.width = width
        self.height = height


class NoSuchAdjacencyError(MazeError, LookupError):
    def __init__(self, a, b):
        super().__init__(f"No wall between {a} and {b}: cells are not neighbors")
        self.a = a
        self.b = b


class WallAlreadyOpenError(MazeError, RuntimeError):
    pass


class MazeFormatError(MazeError, ValueError):
    pass


class RenderSettingsError(MazeError, ValueError):
    pass
