"""basketfx - unsigned transaction preparation for currency baskets."""

__version__ = "0.1.0"
