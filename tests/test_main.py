"""
Tests for the CLI entry point.

The orchestrator is mocked; these tests only cover argument handling
and exit codes.
"""

from unittest.mock import patch

import pytest

import main
from reviewlda.config import settings
from reviewlda.exceptions import DatasetError


def test_parser_defaults():
    args = main.build_parser().parse_args(["--input", "reviews.csv"])

    assert args.input == "reviews.csv"
    assert args.topics == settings.DEFAULT_TOPIC_COUNT
    assert args.min_review_length == 14
    assert args.rare_threshold == 5
    assert args.idf_lower == 5.0
    assert args.idf_upper == 95.0
    assert args.empty_documents == "drop"
    assert "starbucks" in args.exclude


def test_input_and_url_are_exclusive():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args(["--input", "a.csv", "--url", "https://data.example/a.csv"])


def test_main_passes_policy_values():
    with patch("main.setup_logging"), patch("main.PipelineOrchestrator") as mock_cls:
        mock_cls.return_value.run.return_value = "output/topics_summary.csv"

        code = main.main([
            "--input", "reviews.csv",
            "--topics", "6",
            "--rare-threshold", "9",
            "--empty-documents", "keep",
        ])

    assert code == 0
    kwargs = mock_cls.call_args.kwargs
    assert kwargs["rare_threshold"] == 9
    assert kwargs["empty_document_policy"] == "keep"
    mock_cls.return_value.run.assert_called_once_with(
        source="reviews.csv", url=None, topic_count=6, seed=settings.RANDOM_SEED, refresh=False
    )


def test_refresh_flag_reaches_run():
    with patch("main.setup_logging"), patch("main.PipelineOrchestrator") as mock_cls:
        mock_cls.return_value.run.return_value = "output/topics_summary.csv"

        code = main.main(["--url", "https://data.example/b.csv", "--refresh"])

    assert code == 0
    assert mock_cls.return_value.run.call_args.kwargs["refresh"] is True


def test_main_reports_dataset_errors():
    with patch("main.setup_logging"), patch("main.PipelineOrchestrator") as mock_cls:
        mock_cls.return_value.run.side_effect = DatasetError("Cannot read dataset")

        code = main.main(["--input", "missing.csv"])

    assert code == 1


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
