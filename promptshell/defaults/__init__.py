#!/usr/bin/env python3
# promptshell/defaults/__init__.py
from __future__ import annotations

"""
Built-in commands registered after host commands.

A host command with the same name replaces the built-in one.
"""
