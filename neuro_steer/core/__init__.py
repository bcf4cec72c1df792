"""
Core components of the neuro-steer system.

- network: Neuron and Network - fixed random brains
- agent: SteeringAgent - sense, think, move, clamp
"""

from .network import Neuron, Network, ConstructionError, DimensionMismatch
from .agent import SteeringAgent, AgentState, AgentConfig

__all__ = [
    "Neuron",
    "Network",
    "ConstructionError",
    "DimensionMismatch",
    "SteeringAgent",
    "AgentState",
    "AgentConfig",
]
