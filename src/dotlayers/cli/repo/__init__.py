"""External repository commands."""
