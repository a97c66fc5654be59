"""First-boot and upgrade orchestrator for the Ignition gateway container."""

__version__ = "0.1.0"
