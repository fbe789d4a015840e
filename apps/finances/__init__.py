"""Finances app package.

Payment proofs uploaded by users and the premium subscriptions they unlock.
"""
