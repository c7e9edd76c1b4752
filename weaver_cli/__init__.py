"""weaver command line interface."""
