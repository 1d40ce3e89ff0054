"""HTTP API exposing metrics parsing to the topology view."""
