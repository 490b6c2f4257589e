"""
Mail Verifier Scorers
=====================
- Tool call appropriateness: MailboxLayer tool is called when verifying
- Completeness: response covers what the user asked about
- Explanation accuracy (LLM judge): the explanation matches the API findings
"""
from typing import Any

from pydantic import BaseModel, Field

from mailverifier.scorers.base import LLMJudgedScorer, ScoringRun, clamp
from mailverifier.scorers.code import CompletenessScorer, ToolCallAccuracyScorer
from mailverifier.tools.mailboxlayer import TOOL_NAME


class ExplanationAnalysis(BaseModel):
    accurate: bool
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    explanation: str = ""


class ExplanationAccuracyScorer(LLMJudgedScorer):
    """Grades whether the agent's verification explanation is factually consistent."""

    name = "Explanation Accuracy"
    description = (
        "Evaluates whether the assistant accurately explains email verification results "
        "(validity, disposability, deliverability, and syntax correctness)."
    )
    analysis_schema = ExplanationAnalysis
    instructions = """You are an expert evaluator of email verification explanations.
Given the user's request and the assistant's response, determine if the explanation
correctly reflects the email verification results.

Focus on:
- Whether the assistant correctly identifies if the email is valid or invalid.
- Whether it correctly notes if the email is disposable or from a free provider.
- Whether the assistant avoids contradictions or hallucinations.

Return JSON strictly matching the provided schema."""

    def preprocess(self, run: ScoringRun) -> dict[str, Any]:
        return {"user_text": run.user_text, "assistant_text": run.assistant_text}

    def build_prompt(self, preprocessed: dict[str, Any]) -> str:
        return f'''You are evaluating the accuracy of an email verification explanation.
User text:
"""
{preprocessed["user_text"]}
"""
Assistant response:
"""
{preprocessed["assistant_text"]}
"""

Tasks:
1. Check if the assistant correctly reports whether the email is valid, deliverable, or disposable.
2. Verify that it does not include contradictory or fabricated information.
3. Be forgiving about stylistic differences; focus on factual accuracy.

Return JSON with fields:
{{
  "accurate": boolean,
  "confidence": number, // 0-1
  "explanation": string
}}'''

    def generate_score(self, results: dict[str, Any]) -> float:
        r = results.get("analyze_step_result") or {}
        if r.get("accurate"):
            confidence = r.get("confidence")
            return clamp(0.7 + 0.3 * (1.0 if confidence is None else confidence))
        return 0.0

    def generate_reason(self, results: dict[str, Any], score: float) -> str:
        r = results.get("analyze_step_result") or {}
        return (
            f"Explanation scoring: accurate={r.get('accurate', False)}, "
            f"confidence={r.get('confidence', 0)}. Score={score}. {r.get('explanation', '')}"
        )


def mail_tool_call_appropriateness_scorer() -> ToolCallAccuracyScorer:
    return ToolCallAccuracyScorer(expected_tool=TOOL_NAME, strict_mode=False)


def mail_completeness_scorer() -> CompletenessScorer:
    return CompletenessScorer()


def mail_explanation_accuracy_scorer(judge_model: str = "openai/gpt-4o") -> ExplanationAccuracyScorer:
    return ExplanationAccuracyScorer(judge_model=judge_model)
