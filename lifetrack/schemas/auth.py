"""Rule sets for the authentication routes.

Token issuance and verification live outside this service; only the request
shapes are checked here.
"""

from __future__ import annotations

from pydantic import EmailStr
from pydantic import Field

from lifetrack.core.request_validation import ValidationSchema
from lifetrack.core.validation import RuleSet


class AppleUserName(RuleSet):
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)


class AppleUser(RuleSet):
    name: AppleUserName | None = None
    email: EmailStr | None = None


class DeviceInfo(RuleSet):
    device_id: str | None = Field(default=None, max_length=100)
    device_name: str | None = Field(default=None, max_length=255)


class AppleSignInBody(RuleSet):
    identity_token: str
    authorization_code: str
    user: AppleUser | None = None
    device_info: DeviceInfo | None = None


class RefreshBody(RuleSet):
    refresh_token: str = Field(min_length=1)


APPLE_SIGN_IN = ValidationSchema(body=AppleSignInBody)
REFRESH_TOKEN = ValidationSchema(body=RefreshBody)
