"""SocioPrice backend: audience demographics in, product prices out."""

__version__ = "1.0.0"
