"""Authorization module - lets callers inspect their own access."""

# Module metadata
__module_info__ = {
    "name": "authorization",
    "version": "1.0.0",
    "description": "Self-service access queries",
    "dependencies": [],
}
