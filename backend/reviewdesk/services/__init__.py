"""Domain services shared by the API routers and page handlers."""
