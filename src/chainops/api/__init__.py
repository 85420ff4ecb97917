"""HTTP API exposing chain operations as named commands."""
