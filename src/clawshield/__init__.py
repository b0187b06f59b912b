"""ClawShield — skill baseline and update monitoring for OpenClaw on macOS."""

__version__ = "0.1.0"
