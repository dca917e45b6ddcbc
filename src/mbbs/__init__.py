"""Forum thread service."""
