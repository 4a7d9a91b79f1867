"""Domain services for the Trading Journal client core."""
