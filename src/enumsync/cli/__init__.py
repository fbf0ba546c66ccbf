"""enumsync command line interface."""
