"""
PostCraft Messenger Assistant

Gemini-powered content assistant for a Facebook Page: a Messenger webhook
and a JSON API for the browser app.
"""

__version__ = "0.1.0"
