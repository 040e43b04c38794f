"""Cloud provider services."""
