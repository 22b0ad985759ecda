# main.py
"""
Main entry point for the Bouncing Odyssey simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window and builds the simulation for its size.
4. Runs the per-frame loop: step the simulation, then draw and route input.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config, config_section
import numpy as np
import cProfile
import pstats
import io


def main(config_path: str = 'config.json'):
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Bouncing Odyssey Starting ---")

    run_params = config_section(config, 'run_control')
    vis_params = config_section(config, 'visualization')

    from simulation import Simulation
    from visualization import Visualizer

    # The window decides the viewport, the viewport decides the container.
    visualizer = Visualizer(vis_params)
    sim = Simulation(config, visualizer.width, visualizer.height)

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    log_throttle = max(1, run_params.get('log_throttle_steps', 300))
    # 0 runs until the window is closed.
    max_steps = run_params.get('max_steps', 0)

    running = True
    if profiler is not None:
        profiler.enable()
    while running:
        sim.step()

        if not visualizer.draw(sim):
            running = False

        if sim.step_count % log_throttle == 0:
            logging.info(f"Simulation step {sim.step_count} | camera mode: {sim.mode.value}")
            speeds = [p.speed for p in sim.particles]
            if speeds:
                logging.debug(
                    f"Step {sim.step_count} | Particles: {len(speeds)} | "
                    f"Average speed: {np.mean(speeds):.4f} | Orbit angle: {sim.orbit.angle:.3f}"
                )

        if max_steps and sim.step_count >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    if profiler is not None:
        profiler.disable()

    visualizer.close()
    logging.info("Simulation loop finished.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Bouncing Odyssey Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
