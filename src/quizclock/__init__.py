"""quizclock: a word-guessing quiz played against a countdown."""

__version__ = "0.1.0"
