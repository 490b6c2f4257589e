# Mail Verifier Scorers
#
# - base: scorer pipeline, run/result records, sampling
# - code: deterministic tool-call and completeness scorers
# - mailverifier / weather: per-agent scorer sets

from mailverifier.scorers.base import (
    LLMJudgedScorer,
    Scorer,
    ScorerBinding,
    ScoreResult,
    ScoringRun,
)
from mailverifier.scorers.code import CompletenessScorer, ToolCallAccuracyScorer
from mailverifier.scorers.mailverifier import ExplanationAccuracyScorer
from mailverifier.scorers.weather import TranslationScorer

__all__ = [
    "LLMJudgedScorer",
    "Scorer",
    "ScorerBinding",
    "ScoreResult",
    "ScoringRun",
    "CompletenessScorer",
    "ToolCallAccuracyScorer",
    "ExplanationAccuracyScorer",
    "TranslationScorer",
]
