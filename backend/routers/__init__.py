"""API routers for the HTTP driver."""
