"""
Mail Verifier Workflow
======================
fetch-email-verification -> analyze-verification

1. Fetch MailboxLayer data (SMTP and format checks on).
2. Have the mail verifier agent turn it into a readable summary.
"""
import json
import logging

import httpx
from pydantic import BaseModel, Field

from mailverifier.agents.mailverifier_agent import AGENT_ID
from mailverifier.tools.mailboxlayer import EMAIL_PATTERN, api_error_info
from mailverifier.workflows.base import Step, StepContext, Workflow, WorkflowError


logger = logging.getLogger(__name__)

WORKFLOW_ID = "mail-verifier-workflow"


class EmailInput(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, description="The email address to verify")


class VerificationData(BaseModel):
    email: str
    format_valid: bool
    smtp_check: bool
    mx_found: bool
    disposable: bool
    free: bool
    score: float
    did_you_mean: str | None = None


class VerificationSummary(BaseModel):
    summary: str


# =============================================================================
# Step 1: fetch
# =============================================================================

async def fetch_email_verification(data: EmailInput, context: StepContext) -> VerificationData:
    api_key = context.settings.mailboxlayer_api_key
    if not api_key:
        raise WorkflowError("Missing MailboxLayer API key")

    params = {"access_key": api_key, "email": data.email, "smtp": 1, "format": 1}
    try:
        async with context.http_client() as client:
            response = await client.get(context.settings.mailboxlayer_url, params=params)
            payload = response.json()
    except httpx.HTTPError as e:
        raise WorkflowError(f"MailboxLayer request failed: {e}") from e
    except ValueError as e:
        raise WorkflowError("Invalid response from MailboxLayer API") from e

    if not payload or not isinstance(payload, dict):
        raise WorkflowError("Invalid response from MailboxLayer API")

    info = api_error_info(payload)
    if info:
        raise WorkflowError(f"MailboxLayer API error: {info}")

    score = payload.get("score")
    return VerificationData(
        email=data.email,
        format_valid=bool(payload.get("format_valid")),
        smtp_check=bool(payload.get("smtp_check")),
        mx_found=bool(payload.get("mx_found")),
        disposable=bool(payload.get("disposable")),
        free=bool(payload.get("free")),
        score=score if score is not None else 0,
        did_you_mean=payload.get("did_you_mean") or None,
    )


# =============================================================================
# Step 2: analyze
# =============================================================================

def build_analysis_prompt(data: VerificationData) -> str:
    return f"""
You are an AI Email Verification Analyst. Based on the following verification data,
provide a concise, user-friendly summary explaining the email's authenticity and deliverability.

Email verification data:
{json.dumps(data.model_dump(), indent=2)}

Please summarize your findings using this structure:

📧 **Email Address:** [email]

✅ **Verification Summary**
- Format Valid: [Yes/No]
- SMTP Check: [Passed/Failed]
- MX Records Found: [Yes/No]
- Disposable: [Yes/No]
- Free Provider: [Yes/No]
- Overall Confidence Score: [numeric value or rating out of 10]

💡 **Interpretation**
Explain in plain terms whether this email is likely valid, risky, or undeliverable,
and include a recommendation (e.g., "Safe to use", "Check with caution", "Invalid email").

🛠️ **Suggestions**
- If invalid: recommend corrections (e.g., did_you_mean)
- If disposable: warn about temporary address use
- If score is low: advise re-checking or alternative contact
"""


async def analyze_verification(data: VerificationData, context: StepContext) -> VerificationSummary:
    agent = context.get_agent(AGENT_ID)
    summary = await context.stream_text(agent, build_analysis_prompt(data))
    return VerificationSummary(summary=summary)


# =============================================================================
# Workflow
# =============================================================================

fetch_email_verification_step = Step(
    id="fetch-email-verification",
    description="Fetches email verification data from the MailboxLayer API",
    input_model=EmailInput,
    output_model=VerificationData,
    execute=fetch_email_verification,
)

analyze_verification_step = Step(
    id="analyze-verification",
    description="Analyzes and explains the email verification results using the Mail Verifier Agent",
    input_model=VerificationData,
    output_model=VerificationSummary,
    execute=analyze_verification,
)


def create_mail_verifier_workflow() -> Workflow:
    return (
        Workflow(id=WORKFLOW_ID, input_model=EmailInput, output_model=VerificationSummary)
        .then(fetch_email_verification_step)
        .then(analyze_verification_step)
        .commit()
    )
