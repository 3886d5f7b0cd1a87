"""Shared fixtures for the saucecart test suite."""

pytest_plugins = ["saucecart.plugins.session"]
