"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from directory.domain import directory

_FORBIDDEN_CHARACTERS = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


@directory.value_object
class EmailAddress:
    """A validated, lower-cased email address.

    Used by Business contact details and User accounts. Enforces exactly one
    @, non-empty local and domain parts, a dotted domain, no whitespace, no
    consecutive dots, and none of the characters that are never valid in an
    unquoted address.
    """

    address: String(required=True, max_length=254)

    @classmethod
    def build(cls, address):
        """Normalize (trim, lower-case) and validate."""
        return cls(address=address.strip().lower())

    @invariant.post
    def verify_email_address(self):
        email = self.address
        if email is None:
            return

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if "." not in domain_part or ".." in email:
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        for label in domain_part.split("."):
            if label.startswith("-") or label.endswith("-"):
                raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if any(ch in email for ch in _FORBIDDEN_CHARACTERS):
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})
