"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler validates user input, submits work to
the JobService, and renders the delivered result back to the user.
No database access happens on the event loop.
"""
