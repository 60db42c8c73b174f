"""A small tile-map game with a minimal windowing layer, an XPM reader and a .cub map parser."""

__version__ = "0.1.0"

__all__ = ["colornames", "image", "xpm", "hooks", "display", "mapfile", "game", "main"]