"""User domain module.

This domain manages user accounts: registration with unique user names,
credential verification against one-way hashed passwords, profile updates
and the per-caller session profile cached after login.
"""
