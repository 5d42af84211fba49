"""
track_view.py

Passive visualization component for a computed trajectory.

GUI Layer
---------
This module:
- Never recomputes or modifies trajectories
- Contains no planning or physics logic
- Only reads immutable markers and PathProfiles

It renders:
- Boundary markers (cones)
- Road centerline
- Ghost line (optional)
- Racing line, coloured per sample by acceleration

World -> Screen transformation:
    screen_x = (x * pixels_per_meter) + offset_x
    screen_y = (-y * pixels_per_meter) + offset_y
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pygame
from numpy.typing import NDArray

from cone_racer.core.markers import BoundaryMarker, ConeType
from cone_racer.core.path import PathProfile


FloatArray = NDArray[np.float64]
Color = Tuple[int, int, int]


CONE_COLORS: Dict[ConeType, Color] = {
    ConeType.BLUE: (59, 130, 246),
    ConeType.YELLOW: (234, 179, 8),
    ConeType.ORANGE: (249, 115, 22),
    ConeType.CAR_START: (200, 200, 200),
}


# ================================================================
# CONFIGURATION
# ================================================================


@dataclass(frozen=True)
class TrackViewConfig:
    """
    Rendering configuration for TrackView.

    Parameters
    ----------
    road_color : Color
        RGB color for the road centerline.
    ghost_color : Color
        RGB color for the ghost line.
    road_width : int
        Line width for the centerline.
    racing_width : int
        Line width for the racing line.
    cone_radius_px : int
        Cone marker radius in pixels.
    pixels_per_meter : float
        Scale factor from world meters to screen pixels.
    """

    road_color: Color = (90, 90, 90)
    ghost_color: Color = (236, 72, 153)
    road_width: int = 2
    racing_width: int = 3
    cone_radius_px: int = 3
    pixels_per_meter: float = 6.0


def fit_view(
    points: FloatArray,
    width_px: int,
    height_px: int,
    margin_px: int = 40,
) -> Tuple[float, Tuple[int, int]]:
    """
    Scale and offset that fit world points into a window.

    Parameters
    ----------
    points : ndarray of shape (N, 2)
        World coordinates to fit.
    width_px, height_px : int
        Window size.
    margin_px : int
        Border kept free on every side.

    Returns
    -------
    pixels_per_meter : float
    offset_px : tuple[int, int]
    """
    if points.shape[0] == 0:
        return 1.0, (width_px // 2, height_px // 2)

    lo = points.min(axis=0)
    hi = points.max(axis=0)
    span = np.maximum(hi - lo, 1e-6)

    usable_w = max(width_px - 2 * margin_px, 1)
    usable_h = max(height_px - 2 * margin_px, 1)
    ppm = float(min(usable_w / span[0], usable_h / span[1]))

    center = 0.5 * (lo + hi)
    ox = int(round(width_px / 2.0 - center[0] * ppm))
    oy = int(round(height_px / 2.0 + center[1] * ppm))
    return ppm, (ox, oy)


# ================================================================
# TRACK VIEW
# ================================================================


class TrackView:
    """
    Passive renderer for markers and trajectories.

    Notes
    -----
    - Does not modify its inputs.
    - Safe to recreate whenever the pipeline recomputes.
    """

    # ------------------------------------------------------------

    def __init__(
        self,
        markers: Sequence[BoundaryMarker],
        road_path: PathProfile,
        racing_path: PathProfile,
        ghost_path: Optional[PathProfile] = None,
        config: TrackViewConfig | None = None,
        screen_offset_px: Tuple[int, int] = (0, 0),
    ) -> None:
        """
        Initialize TrackView.

        Parameters
        ----------
        markers : Sequence[BoundaryMarker]
            Cones to draw.
        road_path : PathProfile
            Sampled centerline.
        racing_path : PathProfile
            Sampled racing line.
        ghost_path : PathProfile | None
            Optional comparison line.
        config : TrackViewConfig | None
            Optional rendering configuration.
        screen_offset_px : tuple[int, int]
            Pixel offset applied after scaling.
        """
        self._config: TrackViewConfig = config or TrackViewConfig()
        self._offset_px: Tuple[int, int] = screen_offset_px

        self._markers: List[BoundaryMarker] = list(markers)
        self._road: PathProfile = road_path
        self._racing: PathProfile = racing_path
        self._ghost: Optional[PathProfile] = ghost_path

    # ------------------------------------------------------------
    # World -> Screen transform
    # ------------------------------------------------------------

    def world_to_screen(self, points_world: FloatArray) -> List[Tuple[int, int]]:
        """
        Convert world coordinates to pygame screen integer coordinates.

        Parameters
        ----------
        points_world : ndarray of shape (N, 2)

        Returns
        -------
        list[tuple[int, int]]
        """
        ppm: float = self._config.pixels_per_meter
        ox, oy = self._offset_px

        pts: List[Tuple[int, int]] = []
        for x, y in points_world:
            pts.append((int(x * ppm + ox), int(-y * ppm + oy)))
        return pts

    # ------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------

    def draw(self, surface: pygame.Surface) -> None:
        """
        Draw everything on a pygame surface.
        """
        self._draw_polyline(surface, self._road, self._config.road_color, self._config.road_width)

        if self._ghost is not None:
            self._draw_polyline(surface, self._ghost, self._config.ghost_color, 1)

        self._draw_racing_line(surface)
        self._draw_markers(surface)

    # ------------------------------------------------------------

    def _draw_polyline(
        self,
        surface: pygame.Surface,
        profile: PathProfile,
        color: Color,
        width: int,
    ) -> None:
        if len(profile) < 2:
            return

        pygame.draw.lines(surface, color, True, self.world_to_screen(profile.positions), width)

    def _draw_racing_line(self, surface: pygame.Surface) -> None:
        if len(self._racing) < 2:
            return

        pts = self.world_to_screen(self._racing.positions)
        for i in range(len(pts) - 1):
            color = tuple(int(c) for c in self._racing.colors[i])
            pygame.draw.line(surface, color, pts[i], pts[i + 1], self._config.racing_width)

    def _draw_markers(self, surface: pygame.Surface) -> None:
        if not self._markers:
            return

        xy = np.array([[m.x, m.y] for m in self._markers], dtype=np.float64)
        for marker, pos in zip(self._markers, self.world_to_screen(xy)):
            pygame.draw.circle(surface, CONE_COLORS[marker.type], pos, self._config.cone_radius_px)
