"""tileproxy.virtualearth: quadkey tile proxy for Virtual Earth imagery."""

__version__ = "0.1.0"
