"""Album curation engine: ranking strategies and playlist distribution algorithms."""

__version__ = "0.1.0"
