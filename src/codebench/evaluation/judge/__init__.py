"""LLM judge support: token discovery, prompt building and response parsing."""
