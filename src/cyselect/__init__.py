"""cy-select: pick the Cypress specs affected by a git diff."""

__version__ = "0.3.0"
