"""ShareNest car-sharing backend."""
