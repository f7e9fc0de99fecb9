"""Order construction and account projection for a perp/spot DEX trading desk."""

__version__ = "0.1.0"
