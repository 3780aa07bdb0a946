"""
Combinator Engine - Entry point.

Loads a network of signal sources and decider combinators, runs it for a
number of discrete steps and logs every node's output after each step.
"""

import logging
import sys

from .combinators.registry import NetworkRegistry
from .config import Settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def main():
    """Main entry point."""
    logger.info("Combinator Engine starting...")

    try:
        # Load configuration
        settings = Settings()
        logging.getLogger().setLevel(settings.log_level.upper())
        logger.info(f"Loading network from {settings.network_config_path}")

        network = NetworkRegistry.load_network_from_config(settings.load_network_config())

        for _ in range(settings.steps):
            snapshot = network.step()
            logger.info(f"Step {network.step_count}:")
            for name, signals in snapshot.items():
                outputs = ", ".join(f"{s.signal.name}={s.count}" for s in signals)
                logger.info(f"  {name}: {outputs or '(none)'}")

        logger.info(NetworkRegistry.describe_network(network))

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
