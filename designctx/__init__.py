"""Design and technical context extraction for hierarchical design documents."""

__version__ = "0.1.0"
