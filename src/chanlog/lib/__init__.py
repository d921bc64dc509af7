"""Project-agnostic libraries bundled with chanlog."""
