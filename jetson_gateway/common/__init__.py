"""Small utilities shared across gateway packages."""
