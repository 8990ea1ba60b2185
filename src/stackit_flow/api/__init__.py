"""HTTP API for StackIt Flow."""
