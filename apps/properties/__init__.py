"""Properties app package.

Listings published by owners: moderation workflow, public search,
Cloudinary-hosted images, amenities and nearby institutions.
"""
