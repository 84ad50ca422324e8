"""Core interfaces.

Contracts (Protocol) implemented by concrete adapters; the core depends on
these abstractions rather than on the adapters themselves.
"""
