"""
utils/ - Shared Utilities
=========================
Cross-cutting helpers used by every layer.
"""
