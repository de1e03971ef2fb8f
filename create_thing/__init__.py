"""create-thing: an interactive wizard for setting up new JavaScript packages."""

__version__ = "0.1.0"
