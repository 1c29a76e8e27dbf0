"""Classified credential errors and cause-chain predicates.

Two error kinds are raised by the resolution pipeline:

* ``NoValidCredentialSourcesError``: no base mechanism produced usable
  credentials (or a named profile does not exist).
* ``CannotAssumeRoleError``: base credentials worked but the STS AssumeRole
  exchange failed.

Callers should test with ``is_no_valid_credential_sources_error`` /
``is_cannot_assume_role_error`` rather than ``isinstance`` so that errors
re-raised inside their own exceptions are still recognized.
"""

from __future__ import annotations

from collections.abc import Iterator

from botocore.exceptions import ClientError


class NoValidCredentialSourcesError(Exception):
    """Raised when no configured or ambient credential source yields credentials."""

    def __init__(
        self,
        cause: BaseException | None = None,
        *,
        caller_name: str = "",
        documentation_url: str = "",
    ) -> None:
        self.cause = cause
        self.caller_name = caller_name
        self.documentation_url = documentation_url
        super().__init__(self._format())

    def _format(self) -> str:
        subject = f" for {self.caller_name}" if self.caller_name else ""
        message = f"no valid credential sources{subject} found."
        if self.documentation_url:
            message += (
                f"\n\nPlease see {self.documentation_url}\n"
                "for more information about providing credentials."
            )
        if self.cause is not None:
            message += f"\n\nError: {self.cause}"
        return message


class CannotAssumeRoleError(Exception):
    """Raised when the STS AssumeRole exchange fails for valid base credentials."""

    def __init__(
        self,
        cause: BaseException | None = None,
        *,
        role_arn: str = "",
        caller_name: str = "",
    ) -> None:
        self.cause = cause
        self.role_arn = role_arn
        self.caller_name = caller_name
        super().__init__(self._format())

    def _format(self) -> str:
        message = f"IAM Role ({self.role_arn}) cannot be assumed."
        message += (
            "\n\nThere are a number of possible causes of this - the most common are:\n"
            "  * The credentials used in order to assume the role are invalid\n"
            "  * The credentials do not have appropriate permission to assume the role\n"
            "  * The role ARN is not valid"
        )
        if self.cause is not None:
            message += f"\n\nError: {self.cause}"
        return message


def iter_error_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield ``err`` and every error it wraps, outermost first."""
    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        explicit = getattr(current, "cause", None)
        if isinstance(explicit, BaseException) and id(explicit) not in seen:
            current = explicit
        elif current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


def is_no_valid_credential_sources_error(err: BaseException | None) -> bool:
    return any(isinstance(e, NoValidCredentialSourcesError) for e in iter_error_chain(err))


def is_cannot_assume_role_error(err: BaseException | None) -> bool:
    return any(isinstance(e, CannotAssumeRoleError) for e in iter_error_chain(err))


def error_code(err: BaseException) -> str | None:
    """Return the service error code carried by ``err`` itself, if any."""
    if isinstance(err, ClientError):
        code = err.response.get("Error", {}).get("Code")
        return code if isinstance(code, str) else None
    for attr in ("error_code", "code"):
        code = getattr(err, attr, None)
        if isinstance(code, str):
            return code
    return None


def err_code_equals(err: BaseException | None, *codes: str) -> bool:
    """Report whether ``err`` or any error it wraps carries one of ``codes``."""
    if not codes:
        return False
    for e in iter_error_chain(err):
        code = error_code(e)
        if code is not None and code in codes:
            return True
    return False
