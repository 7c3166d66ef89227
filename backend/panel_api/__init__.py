"""
Discord server-management panel API.
"""
