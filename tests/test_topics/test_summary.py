"""
Unit tests for the Topic Summarizer.
"""

import numpy as np
import pandas as pd
import pytest

from reviewlda.models.topic import TopicModelResult
from reviewlda.topics.summary import TopicSummarizer


@pytest.fixture
def result():
    return TopicModelResult(
        document_topic=np.array([
            [0.8, 0.1, 0.1],
            [0.7, 0.2, 0.1],
            [0.1, 0.9, 0.0],
            [0.5, 0.5, 0.0],
        ]),
        topic_term=np.array([
            [0.6, 0.4, 0.0],
            [0.0, 0.2, 0.8],
            [0.3, 0.3, 0.4],
        ]),
        doc_ids=[10, 11, 12, 13],
        terms=["latte", "mocha", "refund"],
        topic_count=3,
        seed=1
    )


@pytest.fixture
def documents():
    table = pd.DataFrame({
        "doc_id": [10, 11, 12, 13, 14],
        "text": ["a" * 20, "b" * 30, "c" * 40, "d" * 50, "e" * 60],
        "rating": [5, None, 1, 4, 2],
        "date": [None] * 5,
        "location": [None] * 5,
        "length": [20, 30, 40, 50, 60],
        "has_image": [True, False, False, True, False],
    })
    table["rating"] = table["rating"].astype("Int64")
    return table


def test_assign_dominant_topic(result):
    assignments = TopicSummarizer().assign(result)

    assert list(assignments["doc_id"]) == [10, 11, 12, 13]
    assert list(assignments["topic"]) == [0, 0, 1, 0]  # tie on 13 goes to topic 0
    assert assignments.loc[2, "weight"] == pytest.approx(0.9)


def test_summarize_metadata(result, documents):
    summaries = TopicSummarizer(top_n=2).summarize(result, documents, {0: "Drinks"})

    drinks, service, empty = summaries
    assert drinks.label == "Drinks"
    assert drinks.top_terms == ["latte", "mocha"]
    assert drinks.document_count == 3
    assert drinks.mean_rating == pytest.approx(4.5)  # doc 11 has no rating
    assert drinks.mean_length == pytest.approx(100 / 3)
    assert drinks.image_share == pytest.approx(2 / 3)

    assert service.label == "refund / mocha"
    assert service.mean_rating == pytest.approx(1.0)
    assert service.image_share == pytest.approx(0.0)


def test_topic_without_documents(result, documents):
    summaries = TopicSummarizer().summarize(result, documents)

    empty = summaries[2]
    assert empty.document_count == 0
    assert empty.mean_rating is None
    assert empty.mean_length is None
    assert empty.image_share is None


def test_rating_profile(result, documents):
    profile = TopicSummarizer().rating_profile(result, documents)

    assert list(profile.columns) == [1, 2, 3, 4, 5]
    assert list(profile.index) == [0, 1, 2]
    assert profile.loc[0, 5] == pytest.approx(0.5)
    assert profile.loc[0, 4] == pytest.approx(0.5)
    assert profile.loc[1, 1] == pytest.approx(1.0)
    assert profile.loc[2].sum() == 0


def test_to_frame(result, documents):
    summarizer = TopicSummarizer(top_n=3)
    frame = summarizer.to_frame(summarizer.summarize(result, documents))

    assert len(frame) == 3
    assert frame.loc[0, "top_terms"] == "latte, mocha, refund"
    assert frame["document_count"].sum() == 4


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
