# File: src/llm/prompt_builder.py
"""
Prompt building module for advice requests.
"""

import datetime
from typing import List

from src.core.config_manager import Config
from src.models.habits import Habit
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

SYSTEM_PROMPT = (
    'You are the "Second Brain" AI, a ruthless high-performance strategist. '
    "Your tone is professional, analytical, concise, and business-oriented. No fluff, no emotion."
)


class AdvicePromptBuilder:
    """Builds the user prompt summarizing protocol execution."""

    def __init__(self, language: str = Config.ADVICE_LANGUAGE):
        self.language = language

    def build_summary(self, habits: List[Habit], today: datetime.date) -> str:
        """One line per habit with its streak and today's status."""
        lines = []
        for habit in habits:
            status = "EXECUTED" if habit.is_completed_on(today) else "PENDING"
            lines.append(f"PROTOCOL: {habit.title} | STREAK: {habit.streak} | STATUS: {status}")
        return "\n".join(lines)

    def build(self, habits: List[Habit], today: datetime.date) -> str:
        """
        Build the complete advice prompt.

        Args:
            habits: Current habit list
            today: Local calendar day used for EXECUTED/PENDING

        Returns:
            Prompt text for the model
        """
        summary = self.build_summary(habits, today) or "(no protocols defined)"
        prompt = (
            "Analyze the following user protocols (habits) and execution status:\n"
            f"{summary}\n\n"
            f"Output a single strategic insight or directive (max 2 sentences) in {self.language}.\n"
            "Focus on efficiency, system optimization, and discipline.\n"
            "If performance is low, demand immediate correction. If high, acknowledge efficiency."
        )
        logger.debug(f"Advice prompt built for {len(habits)} habits ({len(prompt)} chars)")
        return prompt
