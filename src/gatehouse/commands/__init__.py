"""Subcommands of the gatehouse CLI."""
