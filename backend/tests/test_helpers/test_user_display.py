"""Tests for author display helpers."""

import repositories.db_models as db_models
from helpers.user_display import UNKNOWN_AUTHOR, avatar_url, display_name
from models.config import settings


def make_record(**extra) -> db_models.User:
    fields = {
        "id": 1,
        "username": "lin",
        "email": "lin@studysphere.edu",
        "hashed_password": "x",
        "display_name": "Lin Wei",
    }
    fields.update(extra)
    return db_models.User(**fields)


class TestDisplayName:
    """Tests for display_name."""

    def test_prefers_display_name(self):
        assert display_name(make_record()) == "Lin Wei"

    def test_falls_back_to_username(self):
        assert display_name(make_record(display_name="")) == "lin"

    def test_missing_user(self):
        assert display_name(None) == UNKNOWN_AUTHOR
        assert display_name(None, fallback="Anonymous") == "Anonymous"

    def test_record_has_no_name_alias(self):
        assert not hasattr(make_record(), "name")


class TestAvatarUrl:
    """Tests for avatar_url."""

    def test_default_for_missing_picture(self):
        assert avatar_url(make_record()) == settings.DEFAULT_AVATAR_URL
        assert avatar_url(None) == settings.DEFAULT_AVATAR_URL

    def test_own_picture(self):
        record = make_record(profile_picture="/uploads/avatars/lin.png")

        assert avatar_url(record) == "/uploads/avatars/lin.png"
