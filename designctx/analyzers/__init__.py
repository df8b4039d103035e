"""Structural complexity and technical context analysis."""
