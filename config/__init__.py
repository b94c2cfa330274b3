"""Runtime configuration for the NodeBot server."""
