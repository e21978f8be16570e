"""Interactive grid shortest-path visualizer."""

__version__ = "0.1.0"
