"""
Data models shared across pipeline stages.
"""
