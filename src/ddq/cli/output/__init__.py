"""Output rendering for CLI commands."""

from .rendering import emit_error, emit_payload, render_json

__all__ = ["emit_error", "emit_payload", "render_json"]
