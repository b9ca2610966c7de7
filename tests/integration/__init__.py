"""Integration tests that drive the full ASGI app through its lifespan."""
