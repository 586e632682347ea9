"""Services of the Magic Shelf engine."""
