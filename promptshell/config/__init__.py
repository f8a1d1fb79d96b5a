#!/usr/bin/env python3
# promptshell/config/__init__.py
from __future__ import annotations

"""
Package for shell configuration.

Provides:
- Configuration loader with file and environment variable overrides (`load_config`).
- The validated settings object (`ShellConfig`).
"""


from .config import DEFAULTS, ENV_PREFIX, ShellConfig, build_config, load_config

__all__ = [
    "DEFAULTS",
    "ENV_PREFIX",
    "ShellConfig",
    "build_config",
    "load_config",
]
