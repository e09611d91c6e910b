"""HTTP API for the top stories listing."""
