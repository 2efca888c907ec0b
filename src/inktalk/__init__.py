"""InkTalk server-side components."""

__version__ = "0.1.0"
