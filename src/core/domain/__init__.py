"""Domain models.

Pure, strictly validated data structures (Pydantic v2). The domain layer knows
nothing about HTTP, the CLI or social-media SDKs.
"""
