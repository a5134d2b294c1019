"""Static site composer for fragment-based blogs."""

__version__ = "0.3.0"
