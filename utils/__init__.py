"""Request, token, mail and persistence helpers."""
