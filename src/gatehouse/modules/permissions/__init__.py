"""Permissions module - administration of the permission catalog."""

# Module metadata
__module_info__ = {
    "name": "permissions",
    "version": "1.0.0",
    "description": "Permission catalog administration",
    "dependencies": [],
}
