"""Shared UI constants for passvault."""

WINDOW_TITLE = "passvault"
MASKED_SECRET = "********"
