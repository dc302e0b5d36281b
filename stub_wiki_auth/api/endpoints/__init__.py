"""Remote wiki endpoint functions."""
