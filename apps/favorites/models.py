"""Model definition for favorites.

A ``Favorite`` is a listing bookmarked by a user (usually a student
comparing options). A user can bookmark a listing only once.
"""

from __future__ import annotations

from django.db import models  # type: ignore


class Favorite(models.Model):
    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='favorites'
    )
    property = models.ForeignKey(
        'properties.Property', on_delete=models.CASCADE, related_name='favorited_by'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['user', 'property'], name='unique_user_favorite'),
        ]

    def __str__(self) -> str:
        return f"Favorite listing {self.property_id} of user {self.user_id}"
