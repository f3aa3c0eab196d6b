"""Race result persistence."""
