# -*- coding: utf-8 -*-
"""
Ports Interfaces Package

Defines the interfaces between the application and external infrastructure (audio backends).

Design Principles:
- Use Protocol to define interfaces, supporting structural subtyping.
- The controller depends on these interfaces rather than concrete implementations.
- Facilitates replacing with fake/mock during testing.
"""

from core.ports.media import IMediaElement

__all__ = [
    "IMediaElement",
]
