"""Doubt Solver: HTTP routers."""
