"""Static transform publisher with live reconfiguration.

Periodically republishes a fixed transform between two named frames and lets
an operator adjust its translation, rotation and angle units while running.
"""

__version__ = "0.1.0"

__all__ = [
    "cli",
    "core",
    "runtime",
]
