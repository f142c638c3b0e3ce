"""HTTP API for Backstage."""
