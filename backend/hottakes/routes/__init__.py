"""HotTakes API: FastAPI routers (auth, sauces, health)."""
