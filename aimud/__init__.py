"""AI-MUD: a narrative simulation whose world state is a set of text files."""

__version__ = "0.1.0"
