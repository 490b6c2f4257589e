"""
MailboxLayer Verification Tool
==============================
Single-call client for the MailboxLayer email verification API.

Failures never raise: a missing key, an HTTP error status or a transport
problem all come back as a VerificationResult with `error` set, so the
calling agent can reason about them.
"""
import logging
from typing import Any

import anyio
import httpx
from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from mailverifier.config import Settings, load_settings


logger = logging.getLogger(__name__)

TOOL_NAME = "mailboxlayer_verify"
TOOL_DESCRIPTION = (
    "Verify an email address using the MailboxLayer API. Returns structured "
    "verification data (format, mx, smtp, disposable, score, etc.)."
)
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class VerificationInput(BaseModel):
    email: str = Field(
        ...,
        pattern=EMAIL_PATTERN,
        description="The email address to verify (e.g. user@example.com)",
    )


class VerificationResult(BaseModel):
    """Normalized MailboxLayer verification record."""
    email: str = Field(description="Normalized email returned by MailboxLayer")
    did_you_mean: str | None = Field(default=None, description="Typo suggestion from MailboxLayer")
    format_valid: bool = Field(default=False, description="Whether the email format is valid")
    mx_found: bool = Field(default=False, description="Whether MX records were found for the domain")
    smtp_check: bool = Field(default=False, description="Whether SMTP check passed (deliverable)")
    catch_all: bool = Field(default=False, description="Whether the domain accepts all emails")
    disposable: bool = Field(default=False, description="Whether the email is from a disposable provider")
    free: bool = Field(default=False, description="Whether the email is from a free provider")
    score: float | None = Field(default=None, description="Confidence score from MailboxLayer (0-1)")
    domain: str | None = Field(default=None, description="Domain portion of the email")
    error: str | None = Field(default=None, description="Error message when verification failed")

    @classmethod
    def failed(cls, email: str, error: str) -> "VerificationResult":
        return cls(email=email, error=error)

    @classmethod
    def from_api(cls, email: str, data: dict[str, Any]) -> "VerificationResult":
        score = data.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            score = None
        return cls(
            email=data.get("email") or email,
            did_you_mean=data.get("did_you_mean"),
            format_valid=bool(data.get("format_valid")),
            mx_found=bool(data.get("mx_found")),
            smtp_check=bool(data.get("smtp_check")),
            catch_all=bool(data.get("catch_all")),
            disposable=bool(data.get("disposable")),
            free=bool(data.get("free")),
            score=score,
            domain=data.get("domain"),
            error=None,
        )


def api_error_info(data: dict[str, Any]) -> str | None:
    """
    MailboxLayer reports bad keys, quota and similar problems with HTTP 200
    and a `{"success": false, "error": {...}}` body.
    """
    if data.get("success") is not False or not data.get("error"):
        return None
    error = data["error"]
    if isinstance(error, dict):
        return error.get("info") or error.get("type") or str(error.get("code", "unknown"))
    return str(error)


async def verify_email(
    email: str,
    *,
    api_key: str | None,
    url: str = "https://apilayer.net/api/check",
    client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> VerificationResult:
    """
    Verify one address against MailboxLayer.

    Args:
        email: Address to check (already syntax-validated by the caller)
        api_key: MailboxLayer access key; None skips the network call
        url: Check endpoint
        client: Optional shared HTTP client
        timeout: Timeout for a client created here

    Returns:
        VerificationResult; callers must check `error`
    """
    if not api_key:
        return VerificationResult.failed(email, "Missing MAILBOXLAYER_API_KEY environment variable")

    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as owned_client:
            return await verify_email(email, api_key=api_key, url=url, client=owned_client)

    try:
        response = await client.get(url, params={"access_key": api_key, "email": email})
        if not response.is_success:
            logger.warning(f"⚠️ MailboxLayer returned {response.status_code} for {email}")
            return VerificationResult.failed(
                email,
                f"MailboxLayer HTTP error: {response.status_code} {response.reason_phrase}",
            )
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"⚠️ MailboxLayer request failed: {e}")
        return VerificationResult.failed(email, f"Exception while contacting MailboxLayer: {e}")

    if not isinstance(data, dict):
        return VerificationResult.failed(
            email, "Exception while contacting MailboxLayer: unexpected response payload"
        )

    info = api_error_info(data)
    if info:
        return VerificationResult.failed(email, f"MailboxLayer API error: {info}")

    return VerificationResult.from_api(email, data)


def build_mailboxlayer_tool(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> StructuredTool:
    """
    Wrap verify_email as a LangChain tool.

    Without explicit settings the key is read from the environment each time
    the tool runs.
    """

    async def _arun_tool(email: str) -> dict[str, Any]:
        current = settings or load_settings()
        async with httpx.AsyncClient(timeout=current.http_timeout, transport=transport) as client:
            result = await verify_email(
                email,
                api_key=current.mailboxlayer_api_key,
                url=current.mailboxlayer_url,
                client=client,
            )
        return result.model_dump()

    def _run_tool(email: str) -> dict[str, Any]:
        try:
            return anyio.from_thread.run(_arun_tool, email)
        except RuntimeError:
            return anyio.run(_arun_tool, email)

    return StructuredTool(
        name=TOOL_NAME,
        description=TOOL_DESCRIPTION,
        args_schema=VerificationInput,
        func=_run_tool,
        coroutine=_arun_tool,
    )
