"""Example scripts for rendering scenes."""
