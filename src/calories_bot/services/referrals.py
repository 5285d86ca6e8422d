"""Referral deep links."""

DEFAULT_REFERRAL_BASE_URL = "https://t.me/your_bot_username"


def referral_link(user_id: int, base_url: str = DEFAULT_REFERRAL_BASE_URL) -> str:
    """Build a deep link that opens the bot with the user id as start payload."""
    return f"{base_url}?start={user_id}"
