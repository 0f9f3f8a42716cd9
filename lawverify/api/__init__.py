"""Boundary between a transport layer and the services."""
