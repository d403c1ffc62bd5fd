"""Fetch textbook volumes from Strapi and render them as Markdown pages."""

__version__ = "0.3.0"
