"""FastAPI JSON API and organizer session handling."""
