"""Domain layer for the HatHak notification service."""
