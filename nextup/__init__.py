"""Next Up: what's on now and what's next, from a live-reloaded weekly schedule."""
