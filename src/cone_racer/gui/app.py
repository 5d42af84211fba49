"""
cone_racer.gui.app

Standalone passive viewer for a computed trajectory.

GUI Layer
---------
- Passive visualization only
- Never recomputes the pipeline
- Result and markers are injected

Shows the cones, road centerline, optional ghost line and the racing line
coloured by acceleration, plus a one-line lap summary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import pygame

from cone_racer.core.markers import BoundaryMarker
from cone_racer.gui.track_view import TrackView, TrackViewConfig, fit_view
from cone_racer.simulation.pipeline import PipelineResult


Color = Tuple[int, int, int]


# ================================================================
# CONFIGURATION
# ================================================================


@dataclass(frozen=True)
class AppConfig:
    """
    Viewer configuration container.

    Parameters
    ----------
    width : int
        Window width in pixels.
    height : int
        Window height in pixels.
    background_color : Color
        RGB background color.
    text_color : Color
        RGB color of the summary line.
    window_title : str
        Window caption.
    fps : int
        Redraw rate.
    """

    width: int = 1200
    height: int = 800
    background_color: Color = (25, 25, 25)
    text_color: Color = (230, 230, 230)
    window_title: str = "Cone Racer"
    fps: int = 30


# ================================================================
# APP
# ================================================================


class App:
    """
    Passive viewer application.
    """

    def __init__(
        self,
        markers: Sequence[BoundaryMarker],
        result: PipelineResult,
        config: AppConfig = AppConfig(),
    ) -> None:
        pygame.init()

        self._config: AppConfig = config
        self._result: PipelineResult = result

        self._screen: pygame.Surface = pygame.display.set_mode((config.width, config.height))
        pygame.display.set_caption(config.window_title)
        self._clock: pygame.time.Clock = pygame.time.Clock()
        self._font: pygame.font.Font = pygame.font.Font(None, 24)

        world = np.array([[m.x, m.y] for m in markers], dtype=np.float64).reshape(-1, 2)
        ppm, offset = fit_view(world, config.width, config.height)

        self._track_view = TrackView(
            markers=markers,
            road_path=result.road_path,
            racing_path=result.racing_path,
            ghost_path=result.ghost_path,
            config=TrackViewConfig(pixels_per_meter=ppm),
            screen_offset_px=offset,
        )

        self._running: bool = False

    # ------------------------------------------------------------

    def run(self) -> None:
        self._running = True

        while self._running:
            self._handle_events()
            self._render()
            self._clock.tick(self._config.fps)

        pygame.quit()

    def stop(self) -> None:
        self._running = False

    # ------------------------------------------------------------

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self._running = False

    def _render(self) -> None:
        self._screen.fill(self._config.background_color)
        self._track_view.draw(self._screen)

        meta = self._result.metadata
        summary = (
            f"{self._result.mode.value}  |  {meta.total_length:.1f} m  |  "
            f"lap {meta.est_lap_time:.2f} s  |  avg {meta.avg_speed:.1f} m/s  |  "
            f"lat {meta.max_lat_g:.2f} g  |  long {meta.min_long_g:.2f}/{meta.max_long_g:.2f} g"
        )
        text = self._font.render(summary, True, self._config.text_color)
        self._screen.blit(text, (20, 20))

        pygame.display.flip()
