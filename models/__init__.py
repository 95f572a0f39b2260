"""
models/ - Domain Models
=======================
Plain value objects shared by the repositories, services and handlers.
"""
