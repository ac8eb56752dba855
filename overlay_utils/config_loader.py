#!/usr/bin/env python3
"""
Configuration loader and validator for the box overlay viewer
"""

import yaml
from pathlib import Path
from typing import Dict, Any
from omegaconf import OmegaConf
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/overlay_config.yaml"

REQUIRED_SECTIONS = ('data', 'calibration', 'roi', 'visibility', 'render', 'display', 'logging')


class ConfigLoader:
    """Load and validate overlay configuration"""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)
        self.config = None

    def load(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            config_dict = yaml.safe_load(f)

        if not isinstance(config_dict, dict):
            raise ValueError(f"Config root must be a mapping: {self.config_path}")

        self.config = OmegaConf.create(config_dict)

        self._validate()

        logger.info(f"Loaded configuration from {self.config_path}")
        return OmegaConf.to_container(self.config, resolve=True)

    def _validate(self):
        """Validate configuration parameters"""
        missing = [s for s in REQUIRED_SECTIONS if s not in self.config]
        if missing:
            raise ValueError(f"Missing config sections: {missing}")

        if not self.config.data.get('tracks_file'):
            raise ValueError("data.tracks_file must be specified")

        forward = list(self.config.roi.forward_range)
        if len(forward) != 2 or forward[0] > forward[1]:
            raise ValueError(f"roi.forward_range must be [min, max], got {forward}")
        if self.config.roi.lateral_bound < 0:
            raise ValueError("roi.lateral_bound must be non-negative")

        for key in ('box_color', 'front_color'):
            if len(self.config.render[key]) != 3:
                raise ValueError(f"render.{key} must be a BGR triple")
        if self.config.render.thickness < 1:
            raise ValueError("render.thickness must be >= 1")

        if len(str(self.config.display.quit_key)) != 1:
            raise ValueError("display.quit_key must be a single character")

        if str(self.config.logging.level).upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR'):
            raise ValueError(f"Invalid logging level: {self.config.logging.level}")

        logger.info("Configuration validated successfully")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key"""
        if self.config is None:
            self.load()

        return OmegaConf.select(self.config, key, default=default)

    def save(self, output_path: str):
        """Save configuration to file"""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w') as f:
            OmegaConf.save(self.config, f)

        logger.info(f"Saved configuration to {output_path}")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Convenience function to load configuration"""
    loader = ConfigLoader(config_path)
    return loader.load()
