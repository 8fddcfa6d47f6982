"""
Unit tests for topic labeling.

Note: These tests use mocked LLM responses to avoid API costs.
"""

import json
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from reviewlda.models.topic import TopicModelResult
from reviewlda.topics.labeling import TopicLabeler, top_terms


def make_result():
    return TopicModelResult(
        document_topic=np.array([[0.9, 0.1], [0.2, 0.8]]),
        topic_term=np.array([
            [0.4, 0.3, 0.3, 0.0],
            [0.1, 0.1, 0.1, 0.7],
        ]),
        doc_ids=[0, 1],
        terms=["latte", "mocha", "muffin", "refund"],
        topic_count=2,
        seed=0
    )


@pytest.fixture
def result():
    return make_result()


def test_top_terms_ordered_by_weight(result):
    ranked = top_terms(result, n=3)

    assert ranked[0] == ["latte", "mocha", "muffin"]
    assert ranked[1][0] == "refund"


def test_top_terms_ties_follow_term_order(result):
    ranked = top_terms(result, n=4)

    assert ranked[1] == ["refund", "latte", "mocha", "muffin"]


def test_fallback_labels_without_api_key(result):
    labeler = TopicLabeler(api_key=None, label_terms=2)

    labels = labeler.label(result)

    assert labels == {0: "latte / mocha", 1: "refund / latte"}


def test_llm_labels():
    mock_response = MagicMock()
    mock_response.text = json.dumps({"topic_label": "Espresso drinks"})

    with patch("reviewlda.topics.labeling.genai") as mock_genai:
        mock_model = MagicMock()
        mock_model.generate_content.return_value = mock_response
        mock_genai.GenerativeModel.return_value = mock_model

        labeler = TopicLabeler(api_key="test-key")
        labels = labeler.label(make_result())

    assert labels == {0: "Espresso drinks", 1: "Espresso drinks"}
    mock_genai.configure.assert_called_once_with(api_key="test-key")
    assert mock_model.generate_content.call_count == 2


def test_llm_failure_falls_back_after_retries():
    with patch("reviewlda.topics.labeling.genai") as mock_genai:
        mock_model = MagicMock()
        mock_model.generate_content.return_value = MagicMock(text="not json{{")
        mock_genai.GenerativeModel.return_value = mock_model

        labeler = TopicLabeler(api_key="test-key", max_retries=3)
        labels = labeler.label(make_result())

    assert labels[0] == "latte / mocha / muffin"
    # Two topics, three attempts each
    assert mock_model.generate_content.call_count == 6


def test_llm_missing_field_retries():
    responses = [
        MagicMock(text=json.dumps({"label": "wrong field"})),
        MagicMock(text=json.dumps({"topic_label": "Coffee drinks"})),
    ]
    with patch("reviewlda.topics.labeling.genai") as mock_genai:
        mock_model = MagicMock()
        mock_model.generate_content.side_effect = responses
        mock_genai.GenerativeModel.return_value = mock_model

        labeler = TopicLabeler(api_key="test-key", max_retries=3)
        label = labeler._llm_label(["latte", "mocha"])

    assert label == "Coffee drinks"


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
