"""Sighting id generation."""
import uuid


def generate_sighting_id() -> str:
    """Generate unique sighting ID."""
    return f"SGT-{uuid.uuid4().hex[:12].upper()}"
