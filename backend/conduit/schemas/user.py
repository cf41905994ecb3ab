"""
Conduit Backend — User Request/Response Schemas
=================================================

What:  Request bodies for register, login and update, and the authenticated
       user payload returned by all of them.
How:   Field rules from conduit.validation run in Pydantic field validators,
       so a failing request never reaches UserService. Every rule of a field
       is reported, and all fields are checked in one pass.

Request bodies are wrapped:

    POST /api/users/register   {"user": {"username", "email", "password"}}
    POST /api/users/login      {"user": {"email", "password"}}
    PUT  /api/user             {"user": {<any subset of fields>}}
"""

from typing import Optional

from pydantic import Field, field_validator

from conduit.schemas.common import CamelModel
from conduit.validation import enforce, enforce_optional, email, length, required, url

# ── Rule Sets ─────────────────────────────────────────────────────────────
USERNAME_LENGTH = length("Username must be between 3 and 20 characters", min=3, max=20)
EMAIL_FORMAT = email("Invalid email format")
PASSWORD_LENGTH = length("Password must be at least 6 characters long", min=6)

USERNAME_RULES = (required("Username cannot be empty"), USERNAME_LENGTH)
EMAIL_RULES = (required("Email cannot be empty"), EMAIL_FORMAT)
PASSWORD_RULES = (required("Password cannot be empty"), PASSWORD_LENGTH)
IMAGE_RULES = (url("Image must be a valid URL"),)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterUser(CamelModel):
    # default=None + validate_default: a missing field still runs its rules
    username: Optional[str] = Field(default=None, validate_default=True)
    email: Optional[str] = Field(default=None, validate_default=True)
    password: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("username")
    @classmethod
    def check_username(cls, v: Optional[str]) -> Optional[str]:
        return enforce(v, USERNAME_RULES)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        return enforce(v, EMAIL_RULES)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        return enforce(v, PASSWORD_RULES)


class RegisterRequest(CamelModel):
    user: RegisterUser


class LoginUser(CamelModel):
    email: Optional[str] = Field(default=None, validate_default=True)
    password: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        return enforce(v, EMAIL_RULES)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        return enforce(v, (required("Password cannot be empty"),))


class LoginRequest(CamelModel):
    user: LoginUser


class UpdateUser(CamelModel):
    """
    Partial update. Omitted fields stay untouched; UserService reads
    `model_fields_set` to tell "omitted" apart from an explicit null/"" for
    bio and image (both of which clear the value).
    """
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        return enforce_optional(v, (EMAIL_FORMAT,))

    @field_validator("username")
    @classmethod
    def check_username(cls, v: Optional[str]) -> Optional[str]:
        return enforce_optional(v, (USERNAME_LENGTH,))

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        return enforce_optional(v, (PASSWORD_LENGTH,))

    @field_validator("image")
    @classmethod
    def check_image(cls, v: Optional[str]) -> Optional[str]:
        # "" clears the image
        if not v:
            return v
        return enforce(v, IMAGE_RULES)


class UpdateUserRequest(CamelModel):
    user: UpdateUser


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AuthenticatedUser(CamelModel):
    """The caller's own account plus a freshly issued token. Never includes the password."""
    email: str
    token: str
    username: str
    bio: str = Field(default="")
    image: str = Field(default="")


class UserResponse(CamelModel):
    user: AuthenticatedUser
