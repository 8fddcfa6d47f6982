"""
ReviewLDA - Topic analysis of customer reviews

CLI entry point for running the preprocessing pipeline and topic model.
"""

import argparse
import logging
import sys

from reviewlda.config import settings
from reviewlda.exceptions import DatasetError, DegenerateDistributionError, EmptyDocumentError
from reviewlda.orchestrator import PipelineOrchestrator


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ReviewLDA - Topic analysis of customer reviews",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyze a local CSV with 4 topics
  python main.py --input data/raw/reviews_data.csv --topics 4

  # Download the dataset first (or set REVIEWLDA_DATASET_URL)
  python main.py --url https://example.org/reviews_data.csv

  # Tighten the vocabulary
  python main.py --input reviews.csv --rare-threshold 10 \\
                 --idf-lower 10 --idf-upper 90

Note: Set GOOGLE_API_KEY to label topics with Gemini.
        """
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--input", help="Path to a local review CSV")
    source.add_argument(
        "--url",
        default=None,
        help="Dataset URL (default: REVIEWLDA_DATASET_URL)"
    )

    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Re-download the dataset even if a cached copy exists"
    )
    parser.add_argument(
        "--topics",
        type=int,
        default=settings.DEFAULT_TOPIC_COUNT,
        help=f"Number of topics (default: {settings.DEFAULT_TOPIC_COUNT})"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=settings.RANDOM_SEED,
        help=f"Random seed for the topic model (default: {settings.RANDOM_SEED})"
    )
    parser.add_argument(
        "--min-review-length",
        type=int,
        default=settings.MIN_REVIEW_LENGTH,
        help=f"Drop reviews of this many characters or fewer (default: {settings.MIN_REVIEW_LENGTH})"
    )
    parser.add_argument(
        "--rare-threshold",
        type=int,
        default=settings.RARE_TERM_THRESHOLD,
        help=f"Terms must occur more often than this (default: {settings.RARE_TERM_THRESHOLD})"
    )
    parser.add_argument(
        "--min-term-length",
        type=int,
        default=settings.MIN_TERM_LENGTH,
        help=f"Minimum characters per term (default: {settings.MIN_TERM_LENGTH})"
    )
    parser.add_argument(
        "--idf-lower",
        type=float,
        default=settings.IDF_LOWER_PERCENTILE,
        help=f"Lower IDF percentile cutoff (default: {settings.IDF_LOWER_PERCENTILE})"
    )
    parser.add_argument(
        "--idf-upper",
        type=float,
        default=settings.IDF_UPPER_PERCENTILE,
        help=f"Upper IDF percentile cutoff (default: {settings.IDF_UPPER_PERCENTILE})"
    )
    parser.add_argument(
        "--exclude",
        nargs="*",
        default=sorted(settings.EXCLUDED_TERMS),
        help="Corpus-specific terms to remove (default: brand name variants)"
    )
    parser.add_argument(
        "--empty-documents",
        default=settings.EMPTY_DOCUMENT_POLICY,
        choices=["drop", "keep", "error"],
        help=f"Documents with no surviving terms (default: {settings.EMPTY_DOCUMENT_POLICY})"
    )
    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )
    parser.add_argument(
        "--output-root",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )
    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    print("=" * 60)
    print("ReviewLDA - Topic analysis of customer reviews")
    print("=" * 60)
    print(f"Source: {args.input or args.url or settings.DATASET_URL or '(cached download)'}")
    print(f"Topics: {args.topics} (seed {args.seed})")
    print(f"IDF band: P{args.idf_lower:g} - P{args.idf_upper:g}")
    print(f"LLM labels: {bool(settings.GOOGLE_API_KEY)}")
    print("=" * 60)
    print()

    try:
        logger.info("Initializing ReviewLDA pipeline...")
        orchestrator = PipelineOrchestrator(
            data_root=args.data_root,
            output_root=args.output_root,
            min_review_length=args.min_review_length,
            rare_threshold=args.rare_threshold,
            min_term_length=args.min_term_length,
            idf_lower_percentile=args.idf_lower,
            idf_upper_percentile=args.idf_upper,
            excluded_terms=args.exclude,
            empty_document_policy=args.empty_documents
        )

        output_path = orchestrator.run(
            source=args.input,
            url=args.url,
            topic_count=args.topics,
            seed=args.seed,
            refresh=args.refresh
        )

        print()
        print("=" * 60)
        print("Pipeline completed successfully!")
        print("=" * 60)
        print(f"Topic summary: {output_path}")
        print(f"Metadata: {output_path.replace('_summary.csv', '_metadata.json')}")
        print("=" * 60)

        logger.info("ReviewLDA completed successfully")
        return 0

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        print("\nPipeline interrupted")
        return 1

    except (DatasetError, DegenerateDistributionError, EmptyDocumentError) as e:
        logger.error(f"Pipeline stopped: {e}")
        print(f"\nPipeline stopped: {e}")
        return 1

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\nPipeline failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        return 1


if __name__ == "__main__":
    sys.exit(main())
