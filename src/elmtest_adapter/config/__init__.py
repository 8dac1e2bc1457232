#
# config/__init__.py
#
"""
Configuration handling sub-package for elmtest-adapter.

Exports the loading function and core configuration models.
"""

from .loader import DEFAULT_CONFIG_NAME, load_config
from .models import AdapterConfig, GlobalConfig, RunnerConfig

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "AdapterConfig",
    "GlobalConfig",
    "RunnerConfig",
    "load_config",
]

# 🔼⚙️
