"""
Shared Layer - Cross-Cutting Concerns
Configuration-aware logging, error envelopes, HTTP middleware and database plumbing
"""
