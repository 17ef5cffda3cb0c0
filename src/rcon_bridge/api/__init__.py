"""HTTP surface for the RCON bridge (FastAPI)."""
