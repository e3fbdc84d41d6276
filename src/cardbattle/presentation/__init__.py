"""Presentation layer for the card battle engine."""
