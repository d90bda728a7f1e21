"""Test groups used by the runner's own tests."""
