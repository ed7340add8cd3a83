"""Doubt Solver backend."""
