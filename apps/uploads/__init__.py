"""Uploads app package: signed direct uploads to Cloudinary."""
