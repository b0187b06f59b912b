"""OpenClaw CLI version discovery, comparison and installation."""
