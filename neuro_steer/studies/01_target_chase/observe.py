"""
Study 01: Target Chase

Run: python -m neuro_steer.studies.01_target_chase.observe

Five agents, five random brains, one target.
Click anywhere to move the target. Close the window to stop.
"""

import argparse
import logging
from typing import Optional, Sequence
import numpy as np

from neuro_steer.config import load_config
from neuro_steer.environments.arena import Simulation
from neuro_steer.observations.visualize import animate_study

HISTORY_LIMIT = 3600  # One minute at ~60 FPS


def run_study(
    steps: Optional[int] = 600,
    animate: bool = True,
    num_agents: Optional[int] = None,
    seed: Optional[int] = None,
    config_path: Optional[str] = None,
    target: Optional[Sequence[float]] = None,
    interval: int = 16
) -> Simulation:
    """
    Observe untrained brains chasing a target.

    Watch:
    - Which agents close the distance, which drift away
    - Wall pinning (clamped positions)
    - Sign of speed (reversing agents)
    """
    print("=" * 50)
    print("Study 01: Target Chase")
    print("=" * 50)
    print("\nPrinciple: A random brain is still a brain")
    print("-" * 50)

    arena_config, agent_config = load_config(config_path)
    simulation = Simulation(arena_config, agent_config)
    if target is not None:
        simulation.set_target(*target)

    rng = np.random.default_rng(seed)
    simulation.populate(num_agents, rng=rng)

    # Open-ended runs keep a rolling window instead of the full history
    limit = HISTORY_LIMIT if steps is None else None
    for agent in simulation.agents.values():
        agent.start_recording(limit)
        print(f"Agent created: {agent}")

    if animate:
        print("\nClick to move the target. Close the window to stop.")
        frames = animate_study(simulation, steps=steps, interval=interval)
    else:
        if steps is None:
            raise ValueError("steps is required without animation")
        for step in range(steps):
            simulation.tick()

            if step % 100 == 0:
                print(f"  Step {step}: mean speed={simulation.get_speeds().mean():.2f}")
        frames = steps

    # Analysis
    print("\n" + "=" * 50)
    print(f"Observations after {frames} ticks")
    print("=" * 50)

    width, height = arena_config.size
    box_w, box_h = agent_config.bounding_box
    for agent in simulation.agents.values():
        if not agent.history:
            continue

        positions = np.array([s.position for s in agent.history])
        speeds = np.array([s.speed for s in agent.history])
        on_wall = (
            (positions[:, 0] <= 0.0) | (positions[:, 0] >= width - box_w) |
            (positions[:, 1] <= 0.0) | (positions[:, 1] >= height - box_h)
        )

        print(f"\n{agent.id}:")
        print(f"  Distance to target: {agent.distance_to(simulation.target):.1f}")
        print(f"  Mean speed: {speeds.mean():.2f} "
              f"(reversing {100 * (speeds < 0).mean():.1f}% of ticks)")
        print(f"  On the wall: {100 * on_wall.mean():.1f}% of ticks")

    print("\n" + "=" * 50)
    print("Study complete. What did you observe?")
    print("=" * 50)

    return simulation


def main():
    parser = argparse.ArgumentParser(description="Target Chase Study")
    parser.add_argument("--steps", type=int, default=600, help="Simulation steps (0 = until closed)")
    parser.add_argument("--agents", type=int, default=None, help="Number of agents")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for brains and positions")
    parser.add_argument("--config", default=None, help="YAML config path")
    parser.add_argument("--target", type=float, nargs=2, metavar=("X", "Y"), default=None)
    parser.add_argument("--interval", type=int, default=16, help="Frame delay in ms")
    parser.add_argument("--no-animate", action="store_true", help="Disable animation")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    steps = args.steps if args.steps > 0 else None
    if steps is None and args.no_animate:
        parser.error("--steps must be positive with --no-animate")

    run_study(
        steps=steps,
        animate=not args.no_animate,
        num_agents=args.agents,
        seed=args.seed,
        config_path=args.config,
        target=args.target,
        interval=args.interval
    )


if __name__ == "__main__":
    main()
