"""HTTP API exposing the registry operations."""
