from flask import current_app


def booking_engine():
    """The orchestrator wired once in create_app."""
    return current_app.extensions["booking"]
