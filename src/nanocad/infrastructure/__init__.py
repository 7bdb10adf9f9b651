"""Infrastructure layer — the session that owns all engine state.

This layer depends on the domain and config layers. It must never import from
services, commands, or output.
"""
