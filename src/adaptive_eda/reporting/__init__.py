"""Result export in JSON and CSV formats."""
