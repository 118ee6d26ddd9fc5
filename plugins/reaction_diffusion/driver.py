"""
Background Step Driver

Runs Simulation.step() on its own thread at a fixed cadence (10 ms by
default), independent of how fast anything draws. Readers call
simulation.snapshot() whenever they like; every pair they get back is a
complete generation.
"""

import logging
import threading
import time

log = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.01


class StepDriver(threading.Thread):
    """Background thread that keeps stepping a Simulation.

    Args:
        simulation: Simulation to advance
        interval: Seconds between step starts
        on_step: Optional callback(pair) run on the driver thread after
            every step (e.g. to request a redraw)
    """

    def __init__(self, simulation, interval=DEFAULT_INTERVAL, on_step=None):
        super().__init__(daemon=True, name="rd-step-driver")
        self.simulation = simulation
        self.interval = interval
        self.on_step = on_step
        self.error = None
        self.steps = 0
        self._stop_event = threading.Event()
        self._resume_event = threading.Event()
        self._resume_event.set()
        self._warned_nonfinite = False

    def run(self):
        log.debug("Step driver started (interval=%.4fs)", self.interval)
        next_tick = time.perf_counter()
        while not self._stop_event.is_set():
            if not self._resume_event.is_set():
                self._resume_event.wait(0.05)
                next_tick = time.perf_counter()
                continue

            try:
                pair = self.simulation.step()
                self.steps += 1
                if self.on_step is not None:
                    self.on_step(pair)
            except Exception as e:
                log.exception("Step driver stopped after error: %s", e)
                self.error = e
                break

            if not self._warned_nonfinite and not self.simulation.is_finite():
                log.warning(
                    "Fields became non-finite at generation %d; "
                    "dt is probably too large for the current parameters",
                    pair.generation,
                )
                self._warned_nonfinite = True

            next_tick += self.interval
            sleep_time = next_tick - time.perf_counter()
            if sleep_time > 0:
                self._stop_event.wait(sleep_time)
            else:
                # Running behind: don't try to catch up with a burst of steps
                next_tick = time.perf_counter()
        log.debug("Step driver stopped after %d steps", self.steps)

    @property
    def paused(self):
        return not self._resume_event.is_set()

    def pause(self):
        self._resume_event.clear()

    def resume(self):
        self._resume_event.set()

    def stop(self, timeout=1.0):
        """Stop the thread and wait for the current step to finish."""
        self._stop_event.set()
        self._resume_event.set()
        if self.is_alive():
            self.join(timeout)
