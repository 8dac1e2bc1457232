#
# src/elmtest_adapter/telemetry/__init__.py
#
"""
Logging setup for elmtest-adapter.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
