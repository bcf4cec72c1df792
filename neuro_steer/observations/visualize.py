"""
observations/visualize.py

Watch the agents chase. Click to move the target.

Rendering and input are thin: they read positions,
draw boxes, and forward clicks. Nothing here decides anything.

Inspired by:
- Sprite games (boxes on a black screen)
- Debugger interfaces
"""

from __future__ import annotations
import logging
from typing import Optional, List, TYPE_CHECKING
import numpy as np

if TYPE_CHECKING:
    from neuro_steer.environments.arena import Simulation

logger = logging.getLogger(__name__)


class ArenaVisualizer:
    """
    matplotlib view of a Simulation.

    - Agents are drawn as their bounding boxes
    - The target is a red marker
    - A mouse click inside the arena moves the target
    - Closing the window stops the loop
    """

    def __init__(
        self,
        simulation: Simulation,
        figsize: tuple = (8, 6),
        trail_length: int = 50
    ):
        self.simulation = simulation
        self.figsize = figsize
        self.trail_length = trail_length
        self.running = True

        # History for trails
        self.position_history: List[np.ndarray] = []

        # Lazy import matplotlib
        self._plt = None
        self._fig = None
        self._ax = None

    def _setup_plot(self):
        """Initialize matplotlib figure and hook up input."""
        import matplotlib.pyplot as plt
        self._plt = plt

        self._fig, self._ax = plt.subplots(figsize=self.figsize)
        self._fig.patch.set_facecolor('#000000')
        self._fig.canvas.mpl_connect('button_press_event', self.on_click)
        self._fig.canvas.mpl_connect('close_event', self.on_close)
        self._setup_axes()

    def _setup_axes(self):
        width, height = self.simulation.config.size
        self._ax.set_xlim(0, width)
        self._ax.set_ylim(height, 0)  # Screen coordinates: y grows downward
        self._ax.set_aspect('equal')
        self._ax.set_facecolor('#000000')

    # ==================== Input ====================

    def on_click(self, event) -> None:
        """Pointer press: move the target to the clicked arena point."""
        if event.inaxes is not self._ax or event.xdata is None or event.ydata is None:
            return
        self.simulation.set_target(event.xdata, event.ydata)

    def on_close(self, event) -> None:
        """Window closed: stop the frame loop."""
        logger.info("Visualizer closed")
        self.running = False

    # ==================== Drawing ====================

    def record_frame(self) -> None:
        """Record current positions for trail rendering."""
        positions = self.simulation.get_positions()
        self.position_history.append(positions.copy())

        # Trim to trail length
        if len(self.position_history) > self.trail_length:
            self.position_history = self.position_history[-self.trail_length:]

    def render(self, show_trails: bool = True, pause: float = 0.016) -> None:
        """Draw the current frame."""
        if self._plt is None:
            self._setup_plot()

        from matplotlib.patches import Rectangle

        self._ax.clear()
        self._setup_axes()

        if show_trails and len(self.position_history) > 1:
            self._render_trails()

        # Target marker
        tx, ty = self.simulation.target
        self._ax.plot([tx], [ty], marker='s', markersize=8, color='#ff0000')

        # Agents as their bounding boxes
        for agent in self.simulation.agents.values():
            x, y = agent.position
            w, h = agent.bounding_box
            self._ax.add_patch(Rectangle((x, y), w, h, color='#00ff00'))

        self._ax.set_title(
            f"Time: {self.simulation.time} | Agents: {len(self.simulation.agents)} | "
            f"Target: ({tx:.0f}, {ty:.0f})",
            color='white', fontsize=12
        )

        if pause > 0:
            self._plt.pause(pause)

    def _render_trails(self) -> None:
        """Render movement trails from box centres, fading with age."""
        half = np.asarray(self.simulation.agent_config.bounding_box) / 2
        n_frames = len(self.position_history)
        for i, positions in enumerate(self.position_history[:-1]):
            next_positions = self.position_history[i + 1]
            alpha = (i + 1) / n_frames * 0.3

            for j in range(min(len(positions), len(next_positions))):
                start = positions[j] + half
                end = next_positions[j] + half
                self._ax.plot(
                    [start[0], end[0]],
                    [start[1], end[1]],
                    color='#4361ee', alpha=alpha, linewidth=1
                )

    def save_frame(self, path: str) -> None:
        """Save current frame to file."""
        if self._fig is not None:
            self._fig.savefig(path, dpi=150, facecolor=self._fig.get_facecolor())

    def close(self) -> None:
        """Close the visualization."""
        if self._plt is not None:
            self._plt.close(self._fig)


def animate_study(
    simulation: Simulation,
    steps: Optional[int] = None,
    interval: int = 16,
    save_path: Optional[str] = None
) -> int:
    """
    Run the frame loop: tick, record, render, wait.

    interval is the frame delay in milliseconds (16 ~ 60 FPS).
    Runs until `steps` frames elapse or the window is closed.
    Returns the number of frames run.
    """
    viz = ArenaVisualizer(simulation)
    frames = 0

    try:
        while viz.running and (steps is None or frames < steps):
            simulation.tick()
            viz.record_frame()
            viz.render(pause=interval / 1000.0)
            frames += 1

        if save_path:
            viz.save_frame(save_path)

    finally:
        viz.close()

    return frames
