"""Use-case layer for catalog loading and batch hibernation.

Each module coordinates domain objects and ports without touching the host
directly, preserving MVVM + Hexagonal boundaries.
"""
