"""
Configuration management for the combinator engine.
"""

import yaml
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Network definition
    network_config_path: str = Field(
        "config/network.yaml",
        description="Path to the network definition file"
    )

    # Simulation settings
    steps: int = Field(
        10,
        ge=0,
        description="Number of discrete steps to run"
    )
    log_level: str = Field("INFO", description="Logging level")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def load_network_config(self) -> dict:
        """Load the network definition from YAML file."""
        config_path = Path(self.network_config_path)

        if not config_path.exists():
            # Return default network if file doesn't exist
            return self._default_network_config()

        with open(config_path, "r") as f:
            return yaml.safe_load(f) or {}

    def _default_network_config(self) -> dict:
        """Default network: a pass-through filter feeding a counter."""
        return {
            "nodes": {
                "feed": {
                    "type": "source",
                    "signals": [
                        {"type": "item", "name": "iron-plate", "count": 40},
                        {"type": "item", "name": "copper-plate", "count": 12},
                        {"type": "item", "name": "coal", "count": 3},
                    ],
                },
                "over_ten": {
                    "type": "decider",
                    "connections": ["feed"],
                    "conditions": {
                        "first_signal": "each",
                        "comparator": ">",
                        "constant": 10,
                        "output_signal": "each",
                        "copy_count_from_input": True,
                    },
                },
                "count_over_ten": {
                    "type": "decider",
                    "connections": ["over_ten"],
                    "conditions": {
                        "first_signal": "each",
                        "comparator": ">",
                        "constant": 0,
                        "output_signal": {"type": "virtual", "name": "signal-C"},
                        "copy_count_from_input": False,
                    },
                },
            },
        }
