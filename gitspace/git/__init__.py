"""Git-facing collaborators: repository discovery and the size probe."""
