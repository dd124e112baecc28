"""Constants shared across unogen modules."""
