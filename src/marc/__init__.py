"""marc: a small personal todo list for the terminal."""

__version__ = "0.3.0"
