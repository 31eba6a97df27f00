"""Local build orchestrator for a static site: compile, serve, watch."""

__version__ = "0.1.0"
