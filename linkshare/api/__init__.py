"""HTTP layer: routers, dependencies and the rate limiter."""
