"""AWS implementation of the provider services."""
