"""HTTP surface of nodotfs."""
