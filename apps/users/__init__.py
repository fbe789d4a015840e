"""Users app package.

Accounts of the marketplace: students (tenants), owners publishing
listings and the back-office staff. ``apps.users.models.CustomUser`` is
the AUTH_USER_MODEL; it logs in by e-mail or phone and carries the
premium plan and identity verification state.
"""
