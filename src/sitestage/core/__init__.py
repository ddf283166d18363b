"""Request resolution, rendering and caching."""
