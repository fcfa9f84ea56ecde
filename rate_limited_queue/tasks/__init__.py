# Task entries and callback dispatch

from .entry import TaskEntry

__all__ = ["TaskEntry"]
