"""Detection stages shared by the FA pipeline."""
