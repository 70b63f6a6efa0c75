"""
Configuration modules for world generation.
"""

from .config import Settings, settings
from .world import (
    HEX_LAYOUTS, get_layout, noise_params_from_settings,
    chunk_config_from_settings, palette_from_settings,
)

__all__ = ['Settings', 'settings', 'HEX_LAYOUTS', 'get_layout', 'noise_params_from_settings',
           'chunk_config_from_settings', 'palette_from_settings']
