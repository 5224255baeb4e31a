#!/usr/bin/env python3
"""
Cellular Automaton Demonstration Script

Runs a glider on a toroidal 2D grid under Conway's rules and a 3D
von Neumann growth rule, logging population and movement per step.
"""

import sys
import os
import logging

import numpy as np

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from src.core import CellularAutomaton, AutomatonConfig, AutomatonError

GLIDER = np.array([[0, 1, 0], [0, 0, 1], [1, 1, 1]], dtype=np.uint8)


def center_of_mass(ca: CellularAutomaton, value: int = 1):
    """Mean coordinate of the cells holding ``value``."""
    cells = np.argwhere(ca.to_array() == value)
    if len(cells) == 0:
        return tuple(s / 2 for s in ca.shape)
    return tuple(float(c) for c in cells.mean(axis=0))


def run_glider_demo(grid_size=30, steps=32, start_row=5, start_col=5):
    """Run a glider under '23/3' with wrap-around and return metrics."""
    logger.info("=== GLIDER ON A TORUS ===")
    logger.info(f"Grid size: {grid_size}x{grid_size}, steps: {steps}")

    ca = CellularAutomaton([grid_size, grid_size], config=AutomatonConfig(out_of_bound="wrap"))
    ca.load_pattern(GLIDER, (start_row, start_col)).set_rule('23/3')

    initial_com = center_of_mass(ca)
    live_counts = [ca.count(1)]

    for step in range(steps):
        ca.iterate()
        live_counts.append(ca.count(1))
        if step % 4 == 3:
            com = center_of_mass(ca)
            logger.info(f"Step {step + 1}: COM=({com[0]:.1f}, {com[1]:.1f}), Live={live_counts[-1]}")

    final_com = center_of_mass(ca)
    delta = (final_com[0] - initial_com[0], final_com[1] - initial_com[1])

    results = {
        "grid_size": grid_size,
        "steps": steps,
        "initial_com": initial_com,
        "final_com": final_com,
        "displacement": delta,
        "live_count_history": live_counts,
        "mass_conserved": all(count == 5 for count in live_counts),
    }

    logger.info(f"Displacement: ({delta[0]:.1f}, {delta[1]:.1f})")
    logger.info(f"Mass conserved: {'YES' if results['mass_conserved'] else 'NO'}")
    return results


def run_growth_demo(size=9, steps=4):
    """Grow von Neumann shells from a single 3D seed with 'S/B1V'."""
    logger.info("=== 3D VON NEUMANN GROWTH ===")

    ca = CellularAutomaton([size, size, size])
    center = size // 2
    ca[center, center, center] = 1
    ca.set_rule('S/B1V')

    populations = [ca.count(1)]
    for step in range(steps):
        ca.iterate()
        populations.append(ca.count(1))
        logger.info(f"Step {step + 1}: live={populations[-1]}")

    return {"size": size, "steps": steps, "populations": populations}


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="N-dimensional cellular automaton demonstration")
    parser.add_argument("--grid-size", type=int, default=30, help="2D grid size (square)")
    parser.add_argument("--steps", type=int, default=32, help="Glider evolution steps")
    parser.add_argument("--cube-size", type=int, default=9, help="3D grid size (cube)")
    parser.add_argument("--debug", action="store_true", help="Log engine internals")

    args = parser.parse_args()
    if args.debug:
        logging.getLogger("src").setLevel(logging.DEBUG)

    try:
        glider = run_glider_demo(grid_size=args.grid_size, steps=args.steps)
        growth = run_growth_demo(size=args.cube_size)

        print(f"\nGlider moved ({glider['displacement'][0]:.1f}, {glider['displacement'][1]:.1f}) cells")
        print(f"3D populations: {growth['populations']}")

    except AutomatonError as e:
        logger.error(f"Demonstration failed: {e}")
        sys.exit(1)
