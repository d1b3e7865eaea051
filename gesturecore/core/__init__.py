"""Domain types, events and the gesture session."""
