"""
Browser-facing JSON API (the single-page app's backend).
"""
