"""
Configuration package for the archive export tool.
"""

from .settings import AppConfig

__all__ = ["AppConfig"]
