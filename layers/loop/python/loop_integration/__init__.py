"""Shared Loop integration code, deployed as the `loop` Lambda layer."""
