"""HTTP API for the employee backend."""
