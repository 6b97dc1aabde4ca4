"""Fit-scoring providers: Gemini."""

from adapters.ai.base import FitAssessment, FitScorer

__all__ = ["FitAssessment", "FitScorer"]
