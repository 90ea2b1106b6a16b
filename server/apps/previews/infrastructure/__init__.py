"""Storage and media tooling for previews app."""
