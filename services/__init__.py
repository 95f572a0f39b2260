"""
services/ - Service Layer
=========================
Runs repository calls off the presentation event loop and hands the results
back to it. Handlers talk to services only, never to repositories.
"""
