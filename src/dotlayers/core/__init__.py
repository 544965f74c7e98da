"""Core pipeline: contracts, backend, resolution, execution, orchestration."""
