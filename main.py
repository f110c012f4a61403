"""
Book Review Sentiment - Lexicon-based sentiment analysis of scraped reviews

CLI entry point for running the batch pipeline.
"""

import argparse
import logging
import sys

from src.errors import MissingResourceError
from src.orchestrator import PipelineOrchestrator
import config.settings as settings


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
        description="Book Review Sentiment - AFINN sentiment vs. star rating",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyze a scraped corpus with the bundled AFINN lexicon
  python main.py --corpus data/reviews.csv

  # Custom lexicon, lower word support threshold
  python main.py --corpus data/reviews.csv \\
                 --lexicon data/my_lexicon.tsv \\
                 --min-support 5

  # Keep long reviews, use 4 worker processes
  python main.py --corpus data/reviews.csv --no-max-length --workers 4
        """
    )

    # Required arguments
    parser.add_argument(
        "--corpus",
        required=True,
        help="CSV of scraped reviews (columns: book, rating, review[, language, author])"
    )

    # Optional arguments
    parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )

    parser.add_argument(
        "--lexicon",
        default=settings.LEXICON_PATH or None,
        help="Tab-separated word/score file (default: AFINN bundled with afinn)"
    )

    parser.add_argument(
        "--min-support",
        type=int,
        default=settings.MIN_WORD_SUPPORT,
        help=f"Minimum distinct reviews per word (default: {settings.MIN_WORD_SUPPORT})"
    )

    parser.add_argument(
        "--min-length",
        type=int,
        default=settings.MIN_REVIEW_LENGTH,
        help=f"Minimum review length in characters (default: {settings.MIN_REVIEW_LENGTH})"
    )

    length_group = parser.add_mutually_exclusive_group()
    length_group.add_argument(
        "--max-length",
        type=int,
        default=settings.MAX_REVIEW_LENGTH,
        help=f"Maximum review length in characters (default: {settings.MAX_REVIEW_LENGTH})"
    )
    length_group.add_argument(
        "--no-max-length",
        action="store_true",
        help="Disable the maximum review length cutoff"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=settings.WORKERS,
        help=f"Worker processes for aggregation (default: {settings.WORKERS})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    return parser


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    # Setup logging
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    max_length = None if args.no_max_length else args.max_length

    # Print banner
    print("=" * 60)
    print("Book Review Sentiment")
    print("=" * 60)
    print(f"Corpus: {args.corpus}")
    print(f"Lexicon: {args.lexicon or 'AFINN (' + settings.LEXICON_LANGUAGE + ')'}")
    print(f"Min word support: {args.min_support}")
    print(f"Review length: {args.min_length}..{max_length or 'unbounded'} chars")
    print(f"Workers: {args.workers}")
    print("=" * 60)
    print()

    try:
        # Initialize orchestrator
        logger.info("Initializing sentiment pipeline...")
        orchestrator = PipelineOrchestrator.from_settings(
            lexicon_path=args.lexicon,
            min_support=args.min_support,
            min_length=args.min_length,
            max_length=max_length,
            workers=args.workers
        )

        # Run pipeline
        paths = orchestrator.run(
            corpus_path=args.corpus,
            output_dir=args.output_dir
        )

        # Success
        print()
        print("=" * 60)
        print("✅ Pipeline completed successfully!")
        print("=" * 60)
        for name, path in paths.items():
            print(f"{name}: {path}")
        print("=" * 60)

        logger.info("Sentiment pipeline completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        print("\n⚠️  Pipeline interrupted")
        sys.exit(1)

    except MissingResourceError as e:
        logger.error(f"Missing resource: {e}")
        print(f"\n❌ Missing resource: {e}")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\n❌ Pipeline failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
