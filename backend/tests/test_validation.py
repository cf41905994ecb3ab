"""
Conduit Backend — Field Rule Tests
====================================

What:  conduit.validation rules and the request schemas that use them.
How:   Schemas are validated directly; error lists are read from the
       PydanticCustomError context exactly as the 422 handler reads them.
"""

import pytest
from pydantic import ValidationError

from conduit.main import flatten_validation_errors
from conduit.schemas.article import NewArticle, UpdateArticle
from conduit.schemas.comment import NewComment
from conduit.schemas.user import LoginUser, RegisterUser, UpdateUser
from conduit.validation import check_rules, email, length, required, url


def _errors(model, payload):
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(payload)
    return flatten_validation_errors(exc_info.value.errors())


class TestRules:

    def test_all_failing_rules_are_reported_in_order(self):
        rules = (required("empty"), length("too short", min=3))
        assert check_rules("", rules) == ["empty", "too short"]
        assert check_rules(None, rules) == ["empty", "too short"]

    def test_passing_value_reports_nothing(self):
        rules = (required("empty"), length("bad length", min=3, max=20))
        assert check_rules("jake", rules) == []

    def test_length_upper_bound(self):
        assert check_rules("x" * 21, (length("bad", min=3, max=20),)) == ["bad"]

    @pytest.mark.parametrize("value", ["jake@jake.jake", "a.b+c@example.org"])
    def test_email_accepts_valid_addresses(self, value):
        assert check_rules(value, (email("bad"),)) == []

    @pytest.mark.parametrize("value", ["jake", "jake@", "@jake.jake", "ja ke@x.org"])
    def test_email_rejects_invalid_addresses(self, value):
        assert check_rules(value, (email("bad"),)) == ["bad"]

    @pytest.mark.parametrize(
        "value",
        ["https://i.imgur.com/x.png", "http://example.com", "example.com/a.jpg"],
    )
    def test_url_accepts_urls(self, value):
        assert check_rules(value, (url("bad"),)) == []

    @pytest.mark.parametrize("value", ["not a url", "", "http://"])
    def test_url_rejects_non_urls(self, value):
        assert check_rules(value, (url("bad"),)) == ["bad"]


class TestUserSchemas:

    def test_register_missing_fields_report_every_rule(self):
        errors = _errors(RegisterUser, {})
        assert errors["username"] == [
            "Username cannot be empty",
            "Username must be between 3 and 20 characters",
        ]
        assert errors["email"] == ["Email cannot be empty", "Invalid email format"]
        assert errors["password"] == [
            "Password cannot be empty",
            "Password must be at least 6 characters long",
        ]

    def test_register_short_username_and_password(self):
        errors = _errors(
            RegisterUser,
            {"username": "jo", "email": "jo@example.com", "password": "123"},
        )
        assert errors == {
            "username": ["Username must be between 3 and 20 characters"],
            "password": ["Password must be at least 6 characters long"],
        }

    def test_register_valid_payload(self):
        user = RegisterUser.model_validate(
            {"username": "jake", "email": "jake@jake.jake", "password": "jakejake"}
        )
        assert user.username == "jake"

    def test_login_requires_password_without_length_rule(self):
        errors = _errors(LoginUser, {"email": "jake@jake.jake", "password": ""})
        assert errors == {"password": ["Password cannot be empty"]}

    def test_update_fields_are_optional(self):
        update = UpdateUser.model_validate({"bio": "I like to skateboard"})
        assert update.model_fields_set == {"bio"}

    def test_update_rejects_invalid_image(self):
        errors = _errors(UpdateUser, {"image": "not a url"})
        assert errors == {"image": ["Image must be a valid URL"]}

    def test_update_accepts_empty_image(self):
        update = UpdateUser.model_validate({"image": ""})
        assert update.image == ""
        assert "image" in update.model_fields_set


class TestArticleSchemas:

    def test_new_article_requires_title_description_body(self):
        errors = _errors(NewArticle, {})
        assert errors["title"][0] == "Title cannot be empty"
        assert errors["description"][0] == "Description cannot be empty"
        assert errors["body"] == ["Body cannot be empty"]

    def test_tag_list_must_be_an_array(self):
        errors = _errors(
            NewArticle,
            {"title": "t", "description": "d", "body": "b", "tagList": "dragons"},
        )
        assert errors == {"tagList": ["TagList must be an array"]}

    def test_tag_list_accepts_camel_case_key(self):
        article = NewArticle.model_validate(
            {"title": "t", "description": "d", "body": "b", "tagList": ["dragons"]}
        )
        assert article.tag_list == ["dragons"]

    def test_title_too_long(self):
        errors = _errors(
            NewArticle, {"title": "x" * 256, "description": "d", "body": "b"}
        )
        assert errors == {"title": ["Title must be between 1 and 255 characters"]}

    def test_update_rejects_empty_title(self):
        errors = _errors(UpdateArticle, {"title": ""})
        assert errors == {"title": ["Title must be between 1 and 255 characters"]}

    def test_update_allows_partial_payload(self):
        update = UpdateArticle.model_validate({"body": "new body"})
        assert update.title is None
        assert update.body == "new body"


class TestCommentSchema:

    def test_empty_comment(self):
        errors = _errors(NewComment, {"body": ""})
        assert errors == {
            "body": [
                "Comment body cannot be empty",
                "Comment must be between 1 and 1000 characters",
            ]
        }

    def test_comment_too_long(self):
        errors = _errors(NewComment, {"body": "x" * 1001})
        assert errors == {"body": ["Comment must be between 1 and 1000 characters"]}
