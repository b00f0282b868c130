"""
Account serializers.
Only the compact shapes embedded in gig and work-order payloads.
"""
from rest_framework import serializers
from apps.accounts.models import User, Profile


class ProfileSummarySerializer(serializers.ModelSerializer):
    """Public profile fields shown next to a participant."""

    class Meta:
        model = Profile
        fields = [
            'username', 'display_name', 'avatar_url', 'headline',
            'hourly_rate_min', 'hourly_rate_max'
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """A participant with their public profile (if they created one)."""
    profile = ProfileSummarySerializer(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'role', 'profile']
        read_only_fields = fields
