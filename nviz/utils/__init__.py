"""Small helpers shared across nviz modules."""
