"""Project Atlas: cross-project analytics from markdown project documents."""

__version__ = "0.1.0"
