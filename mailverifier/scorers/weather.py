"""
Weather Scorers
===============
- Tool call appropriateness: weather tool is called for weather questions
- Completeness
- Translation quality (LLM judge): non-English place names are translated
"""
from typing import Any

from pydantic import BaseModel, Field

from mailverifier.scorers.base import LLMJudgedScorer, clamp
from mailverifier.scorers.code import CompletenessScorer, ToolCallAccuracyScorer
from mailverifier.tools.weather import TOOL_NAME


class TranslationAnalysis(BaseModel):
    non_english: bool
    translated: bool
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    explanation: str = ""


class TranslationScorer(LLMJudgedScorer):

    name = "Translation Quality"
    description = "Checks that non-English location names are translated and used correctly"
    analysis_schema = TranslationAnalysis
    instructions = (
        "You are an expert evaluator of translation quality for geographic locations. "
        "Determine whether the user text mentions a non-English location and whether the "
        "assistant correctly uses an English translation of that location. Be lenient with "
        "transliteration differences and diacritics. Return only the structured JSON "
        "matching the provided schema."
    )

    def build_prompt(self, preprocessed: dict[str, Any]) -> str:
        return f'''You are evaluating if a weather assistant correctly handled translation of a non-English location.
User text:
"""
{preprocessed["user_text"]}
"""
Assistant response:
"""
{preprocessed["assistant_text"]}
"""
Tasks:
1) Identify if the user mentioned a location that appears non-English.
2) If non-English, check whether the assistant used a correct English translation of that location in its response.
3) Be lenient with transliteration differences (e.g., accents/diacritics).
Return JSON with fields:
{{
  "non_english": boolean,
  "translated": boolean,
  "confidence": number, // 0-1
  "explanation": string
}}'''

    def generate_score(self, results: dict[str, Any]) -> float:
        r = results.get("analyze_step_result") or {}
        if not r.get("non_english"):
            return 1.0
        if r.get("translated"):
            confidence = r.get("confidence")
            return clamp(0.7 + 0.3 * (1.0 if confidence is None else confidence))
        return 0.0

    def generate_reason(self, results: dict[str, Any], score: float) -> str:
        r = results.get("analyze_step_result") or {}
        return (
            f"Translation scoring: non_english={r.get('non_english', False)}, "
            f"translated={r.get('translated', False)}, confidence={r.get('confidence', 0)}. "
            f"Score={score}. {r.get('explanation', '')}"
        )


def tool_call_appropriateness_scorer() -> ToolCallAccuracyScorer:
    return ToolCallAccuracyScorer(expected_tool=TOOL_NAME, strict_mode=False)


def completeness_scorer() -> CompletenessScorer:
    return CompletenessScorer()


def translation_scorer(judge_model: str = "openai/gpt-4o") -> TranslationScorer:
    return TranslationScorer(judge_model=judge_model)
