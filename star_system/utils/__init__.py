"""Utility functions for seeded streams and configuration."""

from star_system.utils.reproducibility import mix_seed, mulberry32, random_seed, SeededStream
from star_system.utils.config import load_config, save_config, SystemConfig

__all__ = ["mix_seed", "mulberry32", "random_seed", "SeededStream", "load_config", "save_config", "SystemConfig"]
