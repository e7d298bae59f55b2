"""Signed bearer tokens built on django.core.signing."""

from django.core import signing

from rsvpman.conf import rsvpman_settings

SALT = "rsvpman.auth"


class SignedTokenVerifier:
    """
    AuthVerifier over Django's TimestampSigner (keyed by SECRET_KEY).

    Tokens are issued after a successful OTP verification and carry only
    the user id.
    """

    def __init__(self, max_age: int | None = None):
        self.max_age = max_age if max_age is not None else rsvpman_settings.AUTH_TOKEN_MAX_AGE
        self.signer = signing.TimestampSigner(salt=SALT)

    def issue(self, user_id) -> str:
        return self.signer.sign(str(user_id))

    def verify(self, token: str) -> str | None:
        if not token:
            return None
        try:
            return self.signer.unsign(token, max_age=self.max_age)
        except signing.BadSignature:
            return None
