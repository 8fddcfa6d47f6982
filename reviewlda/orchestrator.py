"""
Pipeline Orchestrator.

Coordinates the preprocessing stages and the topic model for one
analysis run.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Tuple

import pandas as pd

from reviewlda.config import settings
from reviewlda.exceptions import DatasetError
from reviewlda.models.matrix import DocumentTermMatrix
from reviewlda.stages.loader import RecordLoader
from reviewlda.stages.matrix import MatrixBuilder
from reviewlda.stages.tfidf import TfidfPruner
from reviewlda.stages.tokenizer import Lemmatizer, Tokenizer
from reviewlda.stages.vocabulary import DEFAULT_STOP_WORDS, VocabularyFilter
from reviewlda.topics.estimator import LdaEstimator, TopicEstimator
from reviewlda.topics.labeling import TopicLabeler
from reviewlda.topics.summary import TopicSummarizer
from reviewlda.utils.storage import StorageManager

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """
    Orchestrates a single analysis run.

    Coordinates:
    1. Record Loader → 2. Tokenizer → 3. Vocabulary Filter
    → 4. TF-IDF Pruner → 5. Matrix Builder

    Then: Topic model → Labels → Summaries
    """

    def __init__(
        self,
        data_root: str,
        output_root: str,
        estimator: Optional[TopicEstimator] = None,
        labeler: Optional[TopicLabeler] = None,
        lemmatizer: Optional[Callable[[str], str]] = None,
        min_review_length: int = settings.MIN_REVIEW_LENGTH,
        rare_threshold: int = settings.RARE_TERM_THRESHOLD,
        min_term_length: int = settings.MIN_TERM_LENGTH,
        idf_lower_percentile: float = settings.IDF_LOWER_PERCENTILE,
        idf_upper_percentile: float = settings.IDF_UPPER_PERCENTILE,
        stop_words: Optional[Iterable[str]] = None,
        excluded_terms: Iterable[str] = settings.EXCLUDED_TERMS,
        empty_document_policy: str = settings.EMPTY_DOCUMENT_POLICY,
        top_n: int = settings.TOP_TERMS_PER_TOPIC
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            data_root: Root directory for datasets and matrices
            output_root: Directory for summary tables
            estimator: Topic model (default: LDA)
            labeler: Topic labeler (default: Gemini if GOOGLE_API_KEY is set)
            lemmatizer: Token -> lemma function (default: WordNet)
            Remaining arguments are stage policy values; defaults come from settings.
        """
        logger.info("Initializing pipeline components...")

        if stop_words is None:
            stop_words = DEFAULT_STOP_WORDS | settings.EXTRA_STOP_WORDS

        self.storage = StorageManager(
            data_root,
            output_root,
            timeout_seconds=settings.DOWNLOAD_TIMEOUT_SECONDS
        )

        self.loader = RecordLoader(
            min_review_length=min_review_length,
            no_image_sentinel=settings.NO_IMAGE_SENTINEL,
            missing_text_sentinels=settings.MISSING_TEXT_SENTINELS
        )
        self.tokenizer = Tokenizer(lemmatizer if lemmatizer is not None else Lemmatizer())
        self.vocabulary_filter = VocabularyFilter(
            stop_words=stop_words,
            excluded_terms=excluded_terms,
            rare_threshold=rare_threshold,
            min_term_length=min_term_length
        )
        self.pruner = TfidfPruner(
            lower_percentile=idf_lower_percentile,
            upper_percentile=idf_upper_percentile
        )
        self.matrix_builder = MatrixBuilder(empty_document_policy=empty_document_policy)

        self.estimator = estimator if estimator is not None else LdaEstimator(
            max_iter=settings.LDA_MAX_ITER
        )
        self.labeler = labeler if labeler is not None else TopicLabeler(
            api_key=settings.GOOGLE_API_KEY,
            model_name=settings.LABELING_MODEL,
            temperature=settings.LLM_TEMPERATURE,
            max_retries=settings.LABELING_MAX_RETRIES
        )
        self.summarizer = TopicSummarizer(top_n=top_n)
        self.top_n = top_n
        self.stage_sizes = {}

        logger.info("Pipeline initialized successfully")

    def preprocess(self, raw: pd.DataFrame) -> Tuple[pd.DataFrame, DocumentTermMatrix]:
        """
        Run stages 1-5 on a raw review table.

        Returns:
            (documents table, document-term matrix)

        Raises:
            DatasetError: If no review survives loading
        """
        # STAGE 1: Record Loader
        documents = self.loader.load(raw)
        if documents.empty:
            raise DatasetError(
                f"No reviews longer than {self.loader.min_review_length} characters in dataset"
            )

        # STAGE 2: Tokenizer / Lemmatizer
        tokens = self.tokenizer.to_frame(documents)

        # STAGE 3: Vocabulary Filter
        counts = self.vocabulary_filter.filter(tokens)

        # STAGE 4: TF-IDF Pruner
        pruned = self.pruner.prune(counts)

        # STAGE 5: Matrix Builder
        dtm = self.matrix_builder.build(pruned, document_ids=documents["doc_id"])

        self.stage_sizes = {
            "raw_records": len(raw),
            "documents": len(documents),
            "tokens": len(tokens),
            "filtered_pairs": len(counts),
            "filtered_terms": int(counts["term"].nunique()),
            "pruned_pairs": len(pruned),
            "matrix_rows": dtm.shape[0],
            "matrix_columns": dtm.shape[1],
            "empty_documents": len(dtm.empty_doc_ids),
        }
        logger.info(f"Preprocessing complete: {self.stage_sizes}")
        return documents, dtm

    def run(
        self,
        source: Optional[str] = None,
        url: Optional[str] = None,
        topic_count: int = settings.DEFAULT_TOPIC_COUNT,
        seed: int = settings.RANDOM_SEED,
        refresh: bool = False
    ) -> str:
        """
        Run the complete analysis.

        Args:
            source: Local CSV path; if None the dataset is downloaded
            url: Dataset URL (default: settings.DATASET_URL)
            topic_count: Number of topics K
            seed: Random seed passed to the topic model
            refresh: Re-download the dataset even if it is cached

        Returns:
            Path to the topic summary CSV
        """
        start_time = datetime.now()

        if source is None:
            source = self.storage.fetch_dataset(
                url or settings.DATASET_URL,
                settings.DATASET_FILENAME,
                force=refresh
            )

        raw = self.loader.read_csv(source)
        documents, dtm = self.preprocess(raw)
        self.storage.save_matrix(dtm)

        # Topic model never sees all-zero rows
        model_input = dtm.without_empty_rows() if dtm.has_empty_rows() else dtm
        result = self.estimator.fit(model_input, topic_count=topic_count, seed=seed)

        labels = self.labeler.label(result, top_n=self.top_n)
        summaries = self.summarizer.summarize(result, documents, labels)
        assignments = self.summarizer.assign(result)
        assignments["label"] = assignments["topic"].map(labels)
        rating_profile = self.summarizer.rating_profile(result, documents)

        processing_time = (datetime.now() - start_time).total_seconds()
        metadata = {
            "source": str(source),
            "topic_count": topic_count,
            "seed": seed,
            "idf_cutoffs": {
                "lower_percentile": self.pruner.lower_percentile,
                "upper_percentile": self.pruner.upper_percentile,
                "lower": self.pruner.lower_cut,
                "upper": self.pruner.upper_cut
            },
            "stage_sizes": self.stage_sizes,
            "empty_doc_ids": [int(d) for d in dtm.empty_doc_ids],
            "topics": [s.to_dict() for s in summaries],
            "processing_time_seconds": processing_time,
            "generated_at": datetime.now(timezone.utc).isoformat()
        }

        output_path = self.storage.save_summaries(
            summaries=self.summarizer.to_frame(summaries),
            assignments=assignments,
            rating_profile=rating_profile,
            metadata=metadata
        )

        logger.info(f"Pipeline complete! Topic summary: {output_path}")
        return output_path
