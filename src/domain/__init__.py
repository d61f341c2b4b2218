"""Scorekeeper domain modules."""
