"""Text and HTML templates."""
