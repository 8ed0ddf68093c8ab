"""Shelfstr: reading-domain events for a signed-event publishing network."""
