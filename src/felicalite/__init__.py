"""FeliCa Lite-S card authentication and MAC-protected block access."""

__version__ = "0.1.0"
