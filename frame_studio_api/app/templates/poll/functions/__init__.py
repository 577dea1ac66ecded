"""Render functions of the poll template."""
