"""
core/agent.py

A steering agent: sense the target, ask the brain, move.

sense -> forward -> act -> clamp

Nothing else. The brain decides everything, even when
its decisions make little sense. That is the experiment.

Inspired by:
- Reynolds steering behaviors (seek)
- Braitenberg vehicles (sensors wired to motors)
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, replace
import math
from typing import Deque, List, Optional, Sequence, Tuple, Union
import numpy as np

from .network import ConstructionError, Network

SENSOR_COUNT = 4      # distance, bearing, speed, spare
ACTUATOR_COUNT = 2    # speed, heading


@dataclass
class AgentState:
    """
    Where an agent is and how fast it is going.

    The brain is not state. It never changes.
    """
    position: np.ndarray          # Top-left corner of the bounding box
    speed: float = 0.0            # Signed; negative reverses the heading
    age: int = 0                  # Ticks lived

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64).reshape(2)
        self.speed = float(self.speed)


@dataclass
class AgentConfig:
    """
    The fixed nature of an agent.

    The scales tie sensing and actuation to the nominal
    800 px arena and a top speed of 5 px per tick.
    """
    topology: Tuple[int, ...] = (4, 6, 2)
    initial_speed: float = 2.0
    bounding_box: Tuple[float, float] = (40.0, 40.0)

    distance_scale: float = 800.0     # Distance normalizer
    angle_scale: float = math.pi      # Bearing normalizer
    speed_scale: float = 5.0          # Speed normalizer and top speed
    direction_scale: float = math.pi  # Heading output -> radians

    def __post_init__(self):
        self.topology = tuple(self.topology)
        self.bounding_box = tuple(float(v) for v in self.bounding_box)

        for name in ("distance_scale", "angle_scale", "speed_scale", "direction_scale"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")


class SteeringAgent:
    """
    One agent, one brain, one target.

    Principles embodied:
    - Ownership: the agent owns its network, nobody else touches it
    - Independence: reads the shared target, writes only itself
    - Boundedness: always inside the arena after every update
    """

    def __init__(
        self,
        agent_id: str,
        position: Sequence[float],
        arena_size: Tuple[float, float] = (800.0, 600.0),
        config: Optional[AgentConfig] = None,
        rng: Optional[np.random.Generator] = None,
        brain: Optional[Network] = None
    ):
        self.id = agent_id
        self.config = config or AgentConfig()
        self._arena_size = (float(arena_size[0]), float(arena_size[1]))

        width, height = self.config.bounding_box
        if width > self._arena_size[0] or height > self._arena_size[1]:
            raise ConstructionError(
                f"Bounding box {self.config.bounding_box} does not fit "
                f"arena {self._arena_size}"
            )

        self.brain = brain if brain is not None else Network(self.config.topology, rng)
        if self.brain.input_size != SENSOR_COUNT or self.brain.output_size != ACTUATOR_COUNT:
            raise ConstructionError(
                f"Steering brain must map {SENSOR_COUNT} inputs to "
                f"{ACTUATOR_COUNT} outputs, got {list(self.brain.topology)}"
            )

        self.state = AgentState(position=position, speed=self.config.initial_speed)
        self.state.position = self._clamp(self.state.position)

        self.history: Union[List[AgentState], Deque[AgentState]] = []
        self.record_history = False

    # ==================== Read-only views ====================

    @property
    def position(self) -> Tuple[float, float]:
        return float(self.state.position[0]), float(self.state.position[1])

    @property
    def speed(self) -> float:
        return self.state.speed

    @property
    def bounding_box(self) -> Tuple[float, float]:
        return self.config.bounding_box

    @property
    def arena_size(self) -> Tuple[float, float]:
        return self._arena_size

    # ==================== Core Loop ====================

    def sense(self, target: Sequence[float]) -> np.ndarray:
        """
        Turn the target into the brain's four inputs.

        [distance, bearing, speed, 0.0], each normalized.
        atan2(0, 0) == 0, so standing on the target is fine.
        """
        x, y = self.state.position
        dx = float(target[0]) - x
        dy = float(target[1]) - y
        distance = math.hypot(dx, dy)
        angle = math.atan2(dy, dx)

        return np.array([
            distance / self.config.distance_scale,
            angle / self.config.angle_scale,
            self.state.speed / self.config.speed_scale,
            0.0,  # Spare input, always silent
        ])

    def actuate(self, outputs: Sequence[float]) -> AgentState:
        """
        Map brain outputs to the next state without committing it.

        outputs[0] in (-1, 1) -> speed in (-5, 5). Negative speed is
        kept: it walks backwards along the chosen heading.
        """
        if len(outputs) != ACTUATOR_COUNT:
            raise ValueError(f"Expected {ACTUATOR_COUNT} outputs, got {len(outputs)}")

        speed = float(outputs[0]) * self.config.speed_scale
        direction = float(outputs[1]) * self.config.direction_scale

        moved = self.state.position + np.array([
            math.cos(direction) * speed,
            math.sin(direction) * speed,
        ])

        return replace(self.state, position=self._clamp(moved), speed=speed)

    def propose(self, target: Sequence[float]) -> AgentState:
        """Compute the next state for this target. Mutates nothing."""
        outputs = self.brain.forward(self.sense(target))
        return self.actuate(outputs)

    def act(self, outputs: Sequence[float]) -> None:
        """Apply brain outputs to position and speed."""
        self.commit(self.actuate(outputs))

    def tick(self, target: Sequence[float]) -> None:
        """One full sense-think-act cycle."""
        self.commit(self.propose(target))

    def commit(self, state: AgentState) -> None:
        """Adopt a computed state as current."""
        self.state = AgentState(
            position=state.position,
            speed=state.speed,
            age=self.state.age + 1
        )

        if self.record_history:
            self._record()

    def start_recording(self, limit: Optional[int] = None) -> None:
        """
        Record a state after every commit.

        With a limit, only the most recent `limit` states are kept.
        """
        if limit is not None and limit <= 0:
            raise ValueError(f"History limit must be positive, got {limit}")
        self.history = deque(self.history, maxlen=limit)
        self.record_history = True

    # ==================== Internal Mechanisms ====================

    def _clamp(self, position: np.ndarray) -> np.ndarray:
        """Keep the whole bounding box inside the arena."""
        width, height = self.config.bounding_box
        return np.array([
            min(max(position[0], 0.0), self._arena_size[0] - width),
            min(max(position[1], 0.0), self._arena_size[1] - height),
        ])

    def _record(self) -> None:
        """Record current state for later analysis."""
        self.history.append(AgentState(
            position=self.state.position.copy(),
            speed=self.state.speed,
            age=self.state.age
        ))

    # ==================== Utilities ====================

    def distance_to(self, point: Sequence[float]) -> float:
        """Euclidean distance from the agent's corner to a point."""
        return float(np.linalg.norm(np.asarray(point, dtype=np.float64) - self.state.position))

    def __repr__(self) -> str:
        return (
            f"SteeringAgent(id={self.id}, "
            f"pos=[{self.state.position[0]:.2f}, {self.state.position[1]:.2f}], "
            f"speed={self.state.speed:.2f}, "
            f"age={self.state.age})"
        )
