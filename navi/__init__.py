"""NAVI - lexical code navigation across multi-language source trees."""

__version__ = "1.0.0"
