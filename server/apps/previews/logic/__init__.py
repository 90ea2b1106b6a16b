"""Business logic for previews app."""
