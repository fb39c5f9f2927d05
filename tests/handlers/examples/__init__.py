"""Example handler classes used by the entry point tests."""
