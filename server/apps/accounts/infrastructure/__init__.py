"""Identity provider access for accounts app."""
