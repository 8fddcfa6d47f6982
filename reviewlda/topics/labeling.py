"""
Topic Labeler.

Turns topic-term distributions into short human-readable labels, either
from the top terms or with an LLM when an API key is configured.
"""

import json
import logging
from typing import Dict, List, Optional

import google.generativeai as genai
import numpy as np

from reviewlda.models.topic import TopicModelResult

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a customer insights analyst naming topics found in customer reviews.

Your task:
1. Read the most probable words of one topic, in order of weight
2. Generate a short, human-readable topic label (2-5 words)

Rules:
- Use simple, professional language
- Use noun phrases, not full sentences
- Do not mention the brand name
- Prefer the highest-weight words

Output valid JSON only."""


def _construct_user_prompt(terms: List[str]) -> str:
    """Construct user prompt from topic terms."""
    return f"""Top words: {", ".join(terms)}

Generate a concise topic label as JSON:
{{
  "topic_label": "..."
}}"""


def top_terms(result: TopicModelResult, n: int = 10) -> List[List[str]]:
    """
    Highest-weight terms per topic.

    Ties are broken by column order, which is lexicographic.
    """
    ranked = []
    positions = np.arange(len(result.terms))
    for weights in result.topic_term:
        order = np.lexsort((positions, -weights))
        ranked.append([result.terms[j] for j in order[:n]])
    return ranked


class TopicLabeler:
    """
    Labels topics.

    Without an API key, a label is the first few top terms joined with
    " / ". With a key, Gemini proposes the label and the top-term label is
    used whenever the LLM fails.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = "gemini-1.5-flash",
        temperature: float = 0.0,
        max_retries: int = 3,
        label_terms: int = 3
    ):
        """
        Initialize topic labeler.

        Args:
            api_key: Gemini API key; None or empty disables the LLM
            model_name: Model to use for label generation
            temperature: LLM temperature (0.0 for deterministic)
            max_retries: Retry attempts on API failure
            label_terms: Number of top terms in fallback labels
        """
        self.model_name = model_name
        self.temperature = temperature
        self.max_retries = max_retries
        self.label_terms = label_terms
        self.model = None

        if api_key:
            genai.configure(api_key=api_key)
            self.model = genai.GenerativeModel(
                model_name=model_name,
                generation_config={
                    "temperature": temperature,
                    "response_mime_type": "application/json"
                },
                system_instruction=SYSTEM_PROMPT
            )
            logger.info(f"Initialized TopicLabeler with model={model_name}")
        else:
            logger.info("Initialized TopicLabeler with top-term labels")

    def fallback_label(self, terms: List[str]) -> str:
        if not terms:
            return "(empty topic)"
        return " / ".join(terms[:self.label_terms])

    def label(self, result: TopicModelResult, top_n: int = 10) -> Dict[int, str]:
        """
        Label every topic.

        Returns:
            topic index -> label
        """
        labels = {}
        for topic_id, terms in enumerate(top_terms(result, top_n)):
            label = self._llm_label(terms) if self.model is not None else None
            labels[topic_id] = label or self.fallback_label(terms)
            logger.debug(f"Topic {topic_id}: '{labels[topic_id]}'")
        return labels

    def _llm_label(self, terms: List[str]) -> Optional[str]:
        """Ask the LLM for a label; None after max_retries failures."""
        user_prompt = _construct_user_prompt(terms)

        for attempt in range(self.max_retries):
            try:
                response = self.model.generate_content(user_prompt)
                data = json.loads(response.text)

                label = str(data.get("topic_label", "")).strip()
                if not label:
                    logger.warning("LLM response missing 'topic_label' field")
                    continue
                return label

            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse LLM JSON (attempt {attempt + 1}): {e}")

            except Exception as e:
                logger.error(f"LLM API error (attempt {attempt + 1}): {e}")

        logger.warning("Max retries reached, using top-term label")
        return None
