"""AI layer - computer-controlled paddle."""

from .cpu_brain import cpu_brain, select_target

__all__ = ["cpu_brain", "select_target"]
