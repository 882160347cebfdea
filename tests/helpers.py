"""Builders for server-side JSON records used across the tests."""

BASE_URL = "http://mm.test:8065"


def make_user(user_id: str = "u1", username: str = "alice") -> dict:
    """Build a user record as the server returns it."""
    return {
        "id": user_id,
        "create_at": 1700000000000,
        "update_at": 1700000000000,
        "delete_at": 0,
        "username": username,
        "email": f"{username}@example.com",
        "nickname": "",
        "first_name": "Alice",
        "last_name": "Liddell",
        "roles": "system_user",
        "notify_props": {"email": "true"},
        "locale": "en",
    }


def make_channel(channel_id: str = "c1", team_id: str = "t1") -> dict:
    """Build a channel record as the server returns it."""
    return {
        "id": channel_id,
        "create_at": 1700000000000,
        "update_at": 1700000000000,
        "delete_at": 0,
        "team_id": team_id,
        "type": "O",
        "display_name": "Town Square",
        "name": "town-square",
        "header": "",
        "purpose": "",
        "last_post_at": 1700000005000,
        "total_msg_count": 5,
        "extra_update_at": 0,
        "creator_id": "",
    }


def make_post(post_id: str, channel_id: str = "c1", user_id: str = "u1") -> dict:
    """Build a post record as the server returns it."""
    return {
        "id": post_id,
        "create_at": 1700000000000,
        "update_at": 1700000000000,
        "delete_at": 0,
        "user_id": user_id,
        "channel_id": channel_id,
        "root_id": "",
        "parent_id": "",
        "original_id": "",
        "message": f"message {post_id}",
        "type": "",
        "props": {},
        "hashtags": "",
        "filenames": [],
        "pending_post_id": "",
    }
