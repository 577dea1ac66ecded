"""Markup views of the poll template."""
