# Mail Verifier Workflows
#
# - base: Step / Workflow / StepContext, WorkflowError
# - mailverifier: fetch-email-verification -> analyze-verification
# - weather: fetch-weather -> plan-activities

from mailverifier.workflows.base import Step, StepContext, Workflow, WorkflowError
from mailverifier.workflows.mailverifier import create_mail_verifier_workflow
from mailverifier.workflows.weather import create_weather_workflow

__all__ = [
    "Step",
    "StepContext",
    "Workflow",
    "WorkflowError",
    "create_mail_verifier_workflow",
    "create_weather_workflow",
]
