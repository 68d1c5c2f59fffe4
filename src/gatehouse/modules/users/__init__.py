"""Users module - accounts and profiles."""

# Module metadata
__module_info__ = {
    "name": "users",
    "version": "1.0.0",
    "description": "User accounts and profiles",
    "dependencies": [],
}
