"""Realtime RSVP fan-out and SMS reminder service."""
