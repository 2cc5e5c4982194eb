"""Talent assessment report computation service."""
