"""OpenAI-shaped wire translation and the shared OpenAI-style provider base."""

from .translator import apply_openai_stream_payload, build_openai_body, parse_openai_response

__all__ = ["apply_openai_stream_payload", "build_openai_body", "parse_openai_response"]
