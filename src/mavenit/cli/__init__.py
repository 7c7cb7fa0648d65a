#
# src/mavenit/cli/__init__.py
#
"""
Command line interface for mavenit.
"""
from .main import cli

__all__ = ["cli"]

# 🔼⚙️
