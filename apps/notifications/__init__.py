"""Notifications app package.

In-app notifications (the bell in the SPA header) with best-effort e-mail
copies sent through Django's mail backend.
"""
