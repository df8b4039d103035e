"""Facet extractors and the default collaborators the orchestrator fans out to."""
