"""Administration app package.

Super-admin back office: platform statistics, the activity log written by
domain services, and the single-row system configuration that holds the
business limits (prices, image count, auto-approval).
"""
