"""Grants module - role permissions, direct user permissions and memberships."""

# Module metadata
__module_info__ = {
    "name": "grants",
    "version": "1.0.0",
    "description": "Grant and membership administration",
    "dependencies": ["permissions", "roles", "users"],
}
