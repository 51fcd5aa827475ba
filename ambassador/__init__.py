"""Campus ambassador points backend."""
