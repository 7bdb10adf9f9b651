"""nanocad — a textual CAD command-language interpreter."""

__version__ = "0.1.0"
