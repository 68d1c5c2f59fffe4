"""Roles module - named bundles of permissions."""

# Module metadata
__module_info__ = {
    "name": "roles",
    "version": "1.0.0",
    "description": "Role management",
    "dependencies": ["users"],
}
