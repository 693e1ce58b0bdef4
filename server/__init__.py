"""FastAPI transport layer."""
