"""gitlitics: per-author contribution statistics across git repositories."""

__version__ = "0.1.0"
