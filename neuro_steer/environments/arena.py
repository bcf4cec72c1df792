"""
environments/arena.py

A bounded rectangle, a target, and the agents chasing it.

The arena keeps no clock of its own.
Someone outside calls tick() once per frame.

Inspired by:
- Screen-space sprite games (origin top-left, y grows downward)
- Reynolds seek behavior
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np

from neuro_steer.core.agent import SteeringAgent, AgentState, AgentConfig
from neuro_steer.core.network import Network

logger = logging.getLogger(__name__)


@dataclass
class ArenaConfig:
    """Configuration for the arena."""
    size: Tuple[float, float] = (800.0, 600.0)              # Width, height
    initial_target: Optional[Tuple[float, float]] = None    # None = centre
    num_agents: int = 5                                     # Default population

    def __post_init__(self):
        self.size = (float(self.size[0]), float(self.size[1]))
        if self.size[0] <= 0 or self.size[1] <= 0:
            raise ValueError(f"Arena size must be positive, got {self.size}")
        if self.initial_target is not None:
            self.initial_target = (
                float(self.initial_target[0]),
                float(self.initial_target[1]),
            )
        if self.num_agents < 0:
            raise ValueError(f"num_agents must be non-negative, got {self.num_agents}")


class Simulation:
    """
    Owns the agents and the single shared target.

    Features:
    - Explicit arena size, no hardcoded window
    - Target replaced only between ticks
    - All-or-nothing ticks: every agent moves, or none does

    Principles embodied:
    - Agents never interact; each reads the target, writes itself
    - Deterministic order (insertion) for replayable runs
    """

    def __init__(
        self,
        config: Optional[ArenaConfig] = None,
        agent_config: Optional[AgentConfig] = None
    ):
        self.config = config or ArenaConfig()
        self.agent_config = agent_config or AgentConfig()
        self.agents: Dict[str, SteeringAgent] = {}
        self.time = 0

        if self.config.initial_target is not None:
            self._target = self.config.initial_target
        else:
            self._target = (self.config.size[0] / 2, self.config.size[1] / 2)

        # Guards the target against writers outside the frame loop
        self._target_lock = threading.Lock()

    # ==================== Population ====================

    def add_agent(
        self,
        agent_id: str,
        position: Optional[Sequence[float]] = None,
        rng: Optional[np.random.Generator] = None,
        brain: Optional[Network] = None
    ) -> SteeringAgent:
        """Add an agent to the arena."""
        if agent_id in self.agents:
            raise ValueError(f"Agent {agent_id} already exists")

        rng = rng if rng is not None else np.random.default_rng()
        if position is None:
            # Random position within bounds
            position = rng.uniform(
                (0.0, 0.0),
                self.config.size,
                size=2
            )

        agent = SteeringAgent(
            agent_id,
            position,
            arena_size=self.config.size,
            config=self.agent_config,
            rng=rng,
            brain=brain
        )
        self.agents[agent_id] = agent
        logger.debug(f"Added {agent}")
        return agent

    def populate(
        self,
        count: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ) -> List[SteeringAgent]:
        """Add `count` agents drawn from one random source."""
        count = self.config.num_agents if count is None else count
        rng = rng if rng is not None else np.random.default_rng()

        start = len(self.agents)
        added = [self.add_agent(f"agent_{start + i}", rng=rng) for i in range(count)]
        logger.info(f"Populated arena with {count} agents ({len(self.agents)} total)")
        return added

    def remove_agent(self, agent_id: str) -> Optional[SteeringAgent]:
        """Remove an agent from the arena."""
        agent = self.agents.pop(agent_id, None)
        if agent is not None:
            logger.debug(f"Removed {agent_id}")
        return agent

    # ==================== Target ====================

    @property
    def target(self) -> Tuple[float, float]:
        return self._target

    def set_target(self, x: float, y: float) -> None:
        """
        Move the shared target.

        Any real coordinate is accepted. Targets outside the arena
        pull agents into the walls, where clamping holds them.
        """
        with self._target_lock:
            self._target = (float(x), float(y))
        logger.debug(f"Target set to ({x:.1f}, {y:.1f})")

    # ==================== Loop ====================

    def tick(self) -> None:
        """
        Advance every agent by one step.

        Phase 1: every agent proposes its next state from the same target
        Phase 2: all proposals are committed

        A failure in phase 1 leaves the whole arena untouched.
        """
        with self._target_lock:
            target = self._target

        # Phase 1: Think
        proposals: List[Tuple[SteeringAgent, AgentState]] = [
            (agent, agent.propose(target)) for agent in self.agents.values()
        ]

        # Phase 2: Move
        for agent, state in proposals:
            agent.commit(state)

        self.time += 1

    # ==================== Inspection ====================

    def get_state_snapshot(self) -> Dict[str, AgentState]:
        """Get current state of all agents."""
        return {aid: agent.state for aid, agent in self.agents.items()}

    def get_positions(self) -> np.ndarray:
        """Get positions of all agents as an (n, 2) array."""
        return np.array([a.state.position for a in self.agents.values()]).reshape(-1, 2)

    def get_speeds(self) -> np.ndarray:
        """Get signed speeds of all agents."""
        return np.array([a.state.speed for a in self.agents.values()])

    def __repr__(self) -> str:
        return (
            f"Simulation(agents={len(self.agents)}, "
            f"time={self.time}, "
            f"target=({self._target[0]:.1f}, {self._target[1]:.1f}))"
        )
