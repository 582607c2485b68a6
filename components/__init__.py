"""Dash components that make up the dashboard page."""
