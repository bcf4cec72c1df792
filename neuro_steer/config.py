"""
neuro_steer/config.py

YAML configuration for arenas and agents.

Two sections, `arena` and `agent`, each mapping onto its dataclass.
Missing keys keep their defaults; unknown keys are an error.
"""

from __future__ import annotations
from dataclasses import asdict, fields
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from neuro_steer.core.agent import AgentConfig
from neuro_steer.environments.arena import ArenaConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "configs" / "default.yaml"


def _build(cls, section: str, data: Optional[Dict[str, Any]]):
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{section}' must be a mapping")

    known = {f.name for f in fields(cls)}
    for key in data:
        if key not in known:
            raise ValueError(f"Unknown key '{key}' in config section '{section}'")

    return cls(**data)


def config_from_dict(data: Optional[Dict[str, Any]]) -> Tuple[ArenaConfig, AgentConfig]:
    """Build configs from a parsed mapping."""
    data = data or {}
    for section in data:
        if section not in ("arena", "agent"):
            raise ValueError(f"Unknown config section '{section}'")

    arena = _build(ArenaConfig, "arena", data.get("arena"))
    agent = _build(AgentConfig, "agent", data.get("agent"))
    return arena, agent


def load_config(
    config_path: Optional[Union[str, Path]] = None
) -> Tuple[ArenaConfig, AgentConfig]:
    """Load arena and agent configuration from YAML."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    with open(config_path) as f:
        data = yaml.safe_load(f)

    logger.info(f"Loaded config from {config_path}")
    return config_from_dict(data)


def config_to_dict(arena: ArenaConfig, agent: AgentConfig) -> Dict[str, Any]:
    """Plain-data form of both configs, ready for yaml.safe_dump."""
    def plain(value):
        return list(value) if isinstance(value, tuple) else value

    return {
        "arena": {k: plain(v) for k, v in asdict(arena).items()},
        "agent": {k: plain(v) for k, v in asdict(agent).items()},
    }
