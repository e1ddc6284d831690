"""Integration tests that run the installer as a subprocess."""
