"""Nexus habit tracker backend."""
