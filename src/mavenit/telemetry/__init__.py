#
# src/mavenit/telemetry/__init__.py
#
"""
Logging setup and logger type hints for mavenit.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
