"""
Interactive Pygame Viewer for Gray-Scott Reaction-Diffusion

The simulation is stepped by a StepDriver thread on a fixed 10 ms
cadence; this window only reads the latest published generation and
draws it, so a slow frame never slows the chemistry down (and vice versa).

Controls:
  SPACE       Pause / Resume stepping
  R           Reseed with new random rectangles
  H           Toggle HUD overlay
  S           Save screenshot (raster only) to the screenshot directory
  C / Q / ESC Close
  1-7         Select preset
"""

import logging
import time

import numpy as np
import pygame

from . import render
from .controls import THEME, ControlPanel
from .driver import DEFAULT_INTERVAL, StepDriver
from .presets import PRESET_ORDER, get_preset

log = logging.getLogger(__name__)

PANEL_WIDTH = 260
MIN_CANVAS_HEIGHT = 420


class Viewer:
    """Window showing one Simulation with a parameter panel beside it.

    Args:
        simulation: Simulation to display and control
        scale: Integer pixel size of one grid cell on screen
        preset_key: Preset highlighted in the panel at start
        interval: Seconds between simulation steps
        screenshot_dir: Where S saves PNGs
    """

    def __init__(self, simulation, scale=2, preset_key="default",
                 interval=DEFAULT_INTERVAL, screenshot_dir="images"):
        self.simulation = simulation
        self.scale = max(1, int(scale))
        self.preset_key = preset_key
        self.interval = interval
        self.screenshot_dir = screenshot_dir

        h, w = simulation.dimensions()
        self.raster_w = w * self.scale
        self.raster_h = h * self.scale
        self.canvas_w = self.raster_w
        self.canvas_h = max(self.raster_h, MIN_CANVAS_HEIGHT)

        self.running = True
        self.show_hud = True
        self.driver = None
        self.panel = None
        self.sliders = {}
        self.preset_buttons = None
        self.fps_history = []

    @property
    def total_w(self):
        return self.canvas_w + PANEL_WIDTH

    @property
    def paused(self):
        return self.driver is not None and self.driver.paused

    # -----------------------------------------------------------------------
    # Parameter plumbing
    # -----------------------------------------------------------------------

    def _make_param_callback(self, key):
        """Return a slider callback that writes one coefficient."""
        def callback(val):
            self.simulation.set_params(**{key: float(val)})
            log.debug("%s -> %.4f", key, val)
        return callback

    def apply_preset(self, key):
        preset = get_preset(key)
        if preset is None:
            log.warning("Unknown preset: %s", key)
            return
        self.preset_key = key
        self.simulation.set_params(
            DA=preset["DA"], DB=preset["DB"], F=preset["F"], K=preset["K"],
        )
        self._sync_sliders()
        if self.preset_buttons and key in PRESET_ORDER:
            self.preset_buttons.select(PRESET_ORDER.index(key))

    def _sync_sliders(self):
        params = self.simulation.get_params()
        for key, slider in self.sliders.items():
            slider.set_value(params[key])

    def _on_preset_select(self, idx, name):
        self.apply_preset(PRESET_ORDER[idx])

    def _on_reset(self):
        self.simulation.initialize()
        log.info("Reseeded")

    def _toggle_pause(self):
        if self.driver is None:
            return
        if self.driver.paused:
            self.driver.resume()
        else:
            self.driver.pause()

    def _build_panel(self):
        self.panel = ControlPanel(self.canvas_w, 0, PANEL_WIDTH, self.canvas_h)
        params = self.simulation.get_params()

        current = PRESET_ORDER.index(self.preset_key) if self.preset_key in PRESET_ORDER else -1
        self.panel.add_section("PRESET")
        self.preset_buttons = self.panel.add_button_row(
            PRESET_ORDER, selected=current, on_select=self._on_preset_select,
        )

        section = None
        for sdef in self.simulation.get_slider_defs():
            if sdef["section"] != section:
                section = sdef["section"]
                self.panel.add_section(section)
            key = sdef["key"]
            self.sliders[key] = self.panel.add_slider(
                sdef["label"], sdef["min"], sdef["max"], params[key],
                fmt=sdef["fmt"], step=sdef["step"],
                on_change=self._make_param_callback(key),
            )

        self.panel.add_section("SIMULATION")
        self.panel.add_button("Pause / Resume  [space]", on_click=self._toggle_pause)
        self.panel.add_button("Reseed  [r]", on_click=self._on_reset)
        self.panel.add_button("Save image  [s]", on_click=self._save_screenshot)

    # -----------------------------------------------------------------------
    # Drawing
    # -----------------------------------------------------------------------

    def render_canvas(self):
        """RGB canvas array (H, W, 3) for the latest published generation."""
        pair = self.simulation.snapshot()
        pixels = render.upscale(render.to_rgb(pair.a, pair.b), self.scale)
        return render.compose(pixels, self.canvas_w, self.canvas_h, THEME["bg"])

    def _draw_hud(self, screen, fps):
        pair = self.simulation.snapshot()
        p = self.simulation.get_params()
        lines = [
            f"gen {pair.generation}   {fps:.0f} fps",
            f"DA {p['DA']:.3f}  DB {p['DB']:.3f}  f {p['F']:.3f}  k {p['K']:.3f}  dt {p['dt']:.2f}",
        ]
        if self.paused:
            lines.append("PAUSED")
        y = 6
        for line in lines:
            surf = self.hud_font.render(line, True, THEME["text_bright"], (0, 0, 0))
            surf.set_alpha(190)
            screen.blit(surf, (6, y))
            y += surf.get_height() + 2

    def _save_screenshot(self):
        """Save the raster at one pixel per cell (no panel, no HUD)."""
        pair = self.simulation.snapshot()
        path = render.save_png(render.to_rgb(pair.a, pair.b), self.screenshot_dir)
        print(f"Image saved: {path}")
        return path

    # -----------------------------------------------------------------------
    # Main loop
    # -----------------------------------------------------------------------

    def run(self):
        """Open the window and block until it is closed."""
        pygame.init()
        screen = pygame.display.set_mode((self.total_w, self.canvas_h))
        pygame.display.set_caption("Reaction Diffusion")
        clock = pygame.time.Clock()

        self.hud_font = pygame.font.SysFont("menlo", 13)
        self.panel_font = pygame.font.SysFont("menlo", 12)
        self._build_panel()

        self.driver = StepDriver(self.simulation, interval=self.interval)
        self.driver.start()

        try:
            while self.running:
                frame_start = time.time()

                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_keydown(event)
                    else:
                        self.panel.handle_event(event)

                if self.driver.error is not None:
                    log.error("Simulation stopped: %s", self.driver.error)
                    self.running = False

                canvas = self.render_canvas()
                surface = pygame.surfarray.make_surface(canvas.swapaxes(0, 1))
                screen.blit(surface, (0, 0))

                frame_time = time.time() - frame_start
                self.fps_history.append(frame_time)
                if len(self.fps_history) > 30:
                    self.fps_history.pop(0)
                avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)

                if self.show_hud:
                    self._draw_hud(screen, avg_fps)
                self.panel.draw(screen, self.panel_font)

                pygame.display.flip()
                clock.tick(60)
        finally:
            self.driver.stop()
            pygame.quit()

    def _handle_keydown(self, event):
        key = event.key

        if key in (pygame.K_c, pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self._toggle_pause()

        elif key == pygame.K_r:
            self._on_reset()

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_s:
            self._save_screenshot()

        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self.apply_preset(PRESET_ORDER[idx])
