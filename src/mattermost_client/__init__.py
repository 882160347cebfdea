"""Mattermost REST API client.

Client library for the Mattermost v3 REST API: authenticates a user, then
issues typed requests for teams, channels, posts and user profiles, decoding
JSON responses into validated records.
"""

__version__ = "0.1.0"
