"""
Camera for a side-scrolling level

=============================================================================
COORDINATE TRANSFORMATION
=============================================================================

The camera is a view into the world with a fixed zoom:

    screen_x = (world_x - camera_x) * zoom
    screen_y = (world_y - camera_y) * zoom

(camera_x, camera_y) is the TOP-LEFT corner of the visible area in world
pixels. Y points down, matching the TMX and pygame conventions.

=============================================================================
FOLLOWING
=============================================================================

Each frame the camera centers on its target and is then clamped to the level
so the area outside the map is never shown. A level smaller than the view is
centered instead.

=============================================================================
"""

from typing import Tuple


class Camera:
    """2D camera that follows a point and stays inside the level"""

    MIN_ZOOM = 0.5
    MAX_ZOOM = 4.0

    def __init__(self, width: int, height: int, zoom: float = 2.0):
        """
        Parameters:
        -----------
        width, height : int
            Viewport size in screen pixels (the window size)
        zoom : float
            Screen pixels per world pixel
        """
        self.x = 0.0
        self.y = 0.0
        self.width = width
        self.height = height
        self.zoom = max(self.MIN_ZOOM, min(self.MAX_ZOOM, zoom))

        # Level size in world pixels; 0 = unbounded
        self.bounds_width = 0
        self.bounds_height = 0

    @property
    def view_width(self) -> float:
        """Visible width in world pixels"""
        return self.width / self.zoom

    @property
    def view_height(self) -> float:
        return self.height / self.zoom

    def set_bounds(self, level_width: int, level_height: int):
        self.bounds_width = level_width
        self.bounds_height = level_height
        self._clamp()

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self._clamp()

    def follow(self, target_x: float, target_y: float):
        """Center the view on a world position"""
        self.x = target_x - self.view_width / 2
        self.y = target_y - self.view_height / 2
        self._clamp()

    def _clamp(self):
        if self.bounds_width:
            if self.bounds_width <= self.view_width:
                self.x = (self.bounds_width - self.view_width) / 2
            else:
                self.x = max(0.0, min(self.x, self.bounds_width - self.view_width))
        if self.bounds_height:
            if self.bounds_height <= self.view_height:
                self.y = (self.bounds_height - self.view_height) / 2
            else:
                self.y = max(0.0, min(self.y, self.bounds_height - self.view_height))

    def world_to_screen(self, world_x: float, world_y: float) -> Tuple[int, int]:
        return (round((world_x - self.x) * self.zoom),
                round((world_y - self.y) * self.zoom))

    def screen_to_world(self, screen_x: float, screen_y: float) -> Tuple[float, float]:
        return (self.x + screen_x / self.zoom,
                self.y + screen_y / self.zoom)
