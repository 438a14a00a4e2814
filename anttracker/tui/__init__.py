"""Terminal user interface for AntTracker.

Provides immutable screens, a driving loop and the navigation stack.
"""
from .navigator import Navigator
from .router import Router
from .terminal import Terminal

__all__ = ["Navigator", "Router", "Terminal"]
