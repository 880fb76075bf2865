"""HTTP layer: routers, dependencies and response envelopes."""
