"""Domain layer - tracker rules independent of I/O and presentation."""
