"""Score and notification API for music game tournaments."""
