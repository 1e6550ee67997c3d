"""Generate and validate ABA (Cemtex) direct entry payment files."""

__version__ = "0.1.0"
