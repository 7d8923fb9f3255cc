from .rss_renderer import render_rss, render_item

__all__ = ["render_rss", "render_item"]
