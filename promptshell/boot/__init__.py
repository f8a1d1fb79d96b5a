#!/usr/bin/env python3
# promptshell/boot/__init__.py
from __future__ import annotations
"""
Boot sequence package.

Exports:
- boot_sequence: Startup pipeline with optional [  OK  ] / [FAILED] lines.
- BootState: Dataclass containing config, logger, shell and command count.
"""


from .boot import BootState, boot_sequence

__all__ = ["boot_sequence", "BootState"]
