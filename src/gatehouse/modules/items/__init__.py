"""Items module - a generic protected resource."""

# Module metadata
__module_info__ = {
    "name": "items",
    "version": "1.0.0",
    "description": "Items protected by instance-level permissions",
    "dependencies": ["users"],
}
