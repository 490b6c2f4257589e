"""
Deterministic scorers (no judge model).

- ToolCallAccuracyScorer: was the expected tool called?
- CompletenessScorer: does the response cover the key terms of the request?
"""
import re
from typing import Any

from mailverifier.scorers.base import Scorer, ScoringRun


# ============================================================
# Tool Call Accuracy
# ============================================================

class ToolCallAccuracyScorer(Scorer):
    """
    Binary tool-choice check.

    Non-strict: 1.0 when the expected tool is among the calls.
    Strict: 1.0 only when the expected tool is the only tool called.
    """

    def __init__(self, expected_tool: str, strict_mode: bool = False):
        self.expected_tool = expected_tool
        self.strict_mode = strict_mode
        self.name = f"Tool Call Accuracy ({expected_tool})"
        self.description = f"Checks that the agent calls {expected_tool} when appropriate"

    def preprocess(self, run: ScoringRun) -> dict[str, Any]:
        called = run.tool_names
        return {
            "expected_tool": self.expected_tool,
            "called_tools": called,
            "matched": self.expected_tool in called,
            "only_expected": bool(called) and set(called) == {self.expected_tool},
        }

    def generate_score(self, results: dict[str, Any]) -> float:
        pre = results["preprocess_step_result"]
        if self.strict_mode:
            return 1.0 if pre["only_expected"] else 0.0
        return 1.0 if pre["matched"] else 0.0

    def generate_reason(self, results: dict[str, Any], score: float) -> str:
        pre = results["preprocess_step_result"]
        called = ", ".join(pre["called_tools"]) or "none"
        mode = "strict" if self.strict_mode else "lenient"
        return f"Expected {self.expected_tool} ({mode}); called: {called}. Score={score}."


# ============================================================
# Completeness
# ============================================================

_STOPWORDS = {
    "the", "and", "for", "are", "but", "not", "you", "your", "with", "this",
    "that", "from", "have", "has", "was", "were", "will", "would", "can",
    "could", "should", "what", "when", "where", "which", "who", "how", "why",
    "please", "about", "into", "than", "then", "them", "they", "their",
    "there", "its", "our", "out", "any", "all", "also", "just", "some",
    "tell", "give", "does", "did", "let", "get", "check", "is", "it",
}

_TOKEN_PATTERN = re.compile(r"[\w@.'-]+")


def key_terms(text: str) -> set[str]:
    """Lowercased content words of a text (stopwords and short tokens dropped)."""
    terms = set()
    for token in _TOKEN_PATTERN.findall(text.lower()):
        token = token.strip(".'-")
        if len(token) > 2 and token not in _STOPWORDS:
            terms.add(token)
    return terms


class CompletenessScorer(Scorer):
    """Share of the request's key terms that the response mentions."""

    name = "Completeness"
    description = "Checks that the response covers the elements of the request"

    def preprocess(self, run: ScoringRun) -> dict[str, Any]:
        input_text = "\n".join(str(m.get("content") or "") for m in run.input_messages)
        output_text = "\n".join(str(m.get("content") or "") for m in run.output_messages)
        input_terms = key_terms(input_text)
        output_terms = key_terms(output_text)
        return {
            "input_terms": sorted(input_terms),
            "covered": sorted(input_terms & output_terms),
            "missing": sorted(input_terms - output_terms),
        }

    def generate_score(self, results: dict[str, Any]) -> float:
        pre = results["preprocess_step_result"]
        if not pre["input_terms"]:
            return 1.0
        return len(pre["covered"]) / len(pre["input_terms"])

    def generate_reason(self, results: dict[str, Any], score: float) -> str:
        pre = results["preprocess_step_result"]
        reason = f"Covered {len(pre['covered'])}/{len(pre['input_terms'])} key terms. Score={round(score, 4)}."
        if pre["missing"]:
            reason += f" Missing: {', '.join(pre['missing'][:10])}"
        return reason
