from datetime import date

import httpx
import pytest
from pydantic import BaseModel

from mailverifier.workflows.base import Step, StepContext, Workflow, WorkflowError
from mailverifier.workflows.mailverifier import (
    EmailInput,
    VerificationData,
    build_analysis_prompt,
    create_mail_verifier_workflow,
    fetch_email_verification,
)
from mailverifier.workflows.weather import create_weather_workflow

from conftest import StubAgent, json_transport


def mailboxlayer_handler(request: httpx.Request) -> httpx.Response:
    assert request.url.params["smtp"] == "1"
    assert request.url.params["format"] == "1"
    return httpx.Response(200, json={
        "email": request.url.params["email"],
        "format_valid": True,
        "smtp_check": True,
        "mx_found": True,
        "disposable": False,
        "free": True,
        "score": 0.96,
        "did_you_mean": "",
    })


@pytest.mark.asyncio
async def test_mail_verifier_workflow(settings, registry):
    agent = StubAgent(chunks=["📧 john@gmail.com ", "looks safe to use."])
    registry.register("mailverifierAgent", agent)
    streamed = []
    context = StepContext(
        agents=registry,
        settings=settings,
        transport=httpx.MockTransport(mailboxlayer_handler),
        on_chunk=streamed.append,
    )

    result = await create_mail_verifier_workflow().run({"email": "john@gmail.com"}, context)

    assert result.summary == "📧 john@gmail.com looks safe to use."
    assert "".join(streamed) == result.summary
    prompt = agent.received[0][0]["content"]
    assert '"score": 0.96' in prompt
    assert '"did_you_mean": null' in prompt
    assert "Verification Summary" in prompt


@pytest.mark.asyncio
async def test_missing_api_key_stops_workflow(settings, registry):
    agent = StubAgent()
    registry.register("mailverifierAgent", agent)
    context = StepContext(agents=registry, settings=settings.model_copy(update={"mailboxlayer_api_key": None}))

    with pytest.raises(WorkflowError, match="Missing MailboxLayer API key"):
        await create_mail_verifier_workflow().run({"email": "john@gmail.com"}, context)

    assert agent.received == []


@pytest.mark.asyncio
async def test_fetch_defaults_missing_score(settings, registry):
    context = StepContext(agents=registry, settings=settings, transport=json_transport({"format_valid": 1}))

    data = await fetch_email_verification(EmailInput(email="a@b.com"), context)

    assert data.score == 0
    assert data.format_valid is True
    assert data.smtp_check is False
    assert data.did_you_mean is None


@pytest.mark.asyncio
async def test_fetch_rejects_bad_payloads(settings, registry):
    for payload, message in [
        ({}, "Invalid response from MailboxLayer API"),
        ({"success": False, "error": {"info": "quota"}}, "MailboxLayer API error: quota"),
    ]:
        context = StepContext(agents=registry, settings=settings, transport=json_transport(payload))
        with pytest.raises(WorkflowError, match=message):
            await fetch_email_verification(EmailInput(email="a@b.com"), context)


@pytest.mark.asyncio
async def test_invalid_email_is_rejected(settings, registry):
    context = StepContext(agents=registry, settings=settings)

    with pytest.raises(WorkflowError):
        await create_mail_verifier_workflow().run({"email": "not-an-email"}, context)


@pytest.mark.asyncio
async def test_missing_agent_is_reported(settings, registry):
    context = StepContext(agents=registry, settings=settings, transport=httpx.MockTransport(mailboxlayer_handler))

    with pytest.raises(WorkflowError, match="Agent 'mailverifierAgent' not found"):
        await create_mail_verifier_workflow().run({"email": "john@gmail.com"}, context)


def test_analysis_prompt_sections():
    prompt = build_analysis_prompt(VerificationData(
        email="a@b.com", format_valid=True, smtp_check=False, mx_found=True,
        disposable=False, free=False, score=0.5,
    ))
    for section in ("**Email Address:**", "**Verification Summary**", "**Interpretation**", "**Suggestions**"):
        assert section in prompt


@pytest.mark.asyncio
async def test_steps_run_in_order(settings, registry):
    class Number(BaseModel):
        value: int

    calls = []

    async def add_one(data, context):
        calls.append(("add", data.value))
        return {"value": data.value + 1}

    async def double(data, context):
        calls.append(("double", data.value))
        return Number(value=data.value * 2)

    workflow = (
        Workflow(id="math", input_model=Number, output_model=Number)
        .then(Step("add", "", Number, Number, add_one))
        .then(Step("double", "", Number, Number, double))
        .commit()
    )

    result = await workflow.run({"value": 3}, StepContext(agents=registry, settings=settings))

    assert result.value == 8
    assert calls == [("add", 3), ("double", 4)]
    with pytest.raises(WorkflowError):
        workflow.then(Step("late", "", Number, Number, double))


def test_commit_requires_steps():
    class Empty(BaseModel):
        pass

    with pytest.raises(WorkflowError):
        Workflow(id="empty", input_model=Empty, output_model=Empty).commit()


def open_meteo_handler(request: httpx.Request) -> httpx.Response:
    if request.url.host.startswith("geocoding-api"):
        return httpx.Response(200, json={"results": [{"name": "Paris", "latitude": 48.85, "longitude": 2.35}]})
    assert request.url.params["timezone"] == "auto"
    return httpx.Response(200, json={
        "current": {"precipitation": 0.0, "weathercode": 61},
        "hourly": {
            "temperature_2m": [11.0, 16.5, 13.2],
            "precipitation_probability": [20, 70, None],
        },
    })


@pytest.mark.asyncio
async def test_weather_workflow(settings, registry):
    agent = StubAgent(chunks=["Visit the Louvre."])
    registry.register("weatherAgent", agent)
    context = StepContext(agents=registry, settings=settings, transport=httpx.MockTransport(open_meteo_handler))

    result = await create_weather_workflow().run({"city": "Paris"}, context)

    assert result.activities == "Visit the Louvre."
    prompt = agent.received[0][0]["content"]
    assert '"max_temp": 16.5' in prompt
    assert '"min_temp": 11.0' in prompt
    assert '"precipitation_chance": 70' in prompt
    assert '"condition": "Slight rain"' in prompt
    assert date.today().isoformat() in prompt


@pytest.mark.asyncio
async def test_weather_workflow_unknown_city(settings, registry):
    context = StepContext(agents=registry, settings=settings, transport=json_transport({"results": []}))

    with pytest.raises(WorkflowError, match="Location 'Nowhere' not found"):
        await create_weather_workflow().run({"city": "Nowhere"}, context)
