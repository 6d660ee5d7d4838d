import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.config import ConfigError, Settings, load_settings
from .core.descriptors import DescriptorError, load_descriptors
from .core.diagrams import DiagramService


def setup_logging(log_level: str = "INFO") -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    # Reduce noise from third-party libraries
    logging.getLogger("pydot").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apiloom",
        description="apiloom - UML relationship diagrams for API documentation",
    )
    parser.add_argument(
        "descriptors",
        help="YAML or JSON descriptor document"
    )
    parser.add_argument(
        "-d", "--output-dir",
        type=str,
        default=None,
        help="Directory receiving the .dot files (default: diagrams.output_dir)"
    )
    parser.add_argument(
        "--category",
        action="append",
        nargs="+",
        default=[],
        metavar="SPEC",
        help="Declare a category: name[:fill[:line]], or name fill[:line], or name fill line"
    )
    parser.add_argument(
        "--no-package-diagram",
        action="store_true",
        help="Skip the package dependency overview"
    )
    parser.add_argument(
        "--coupling",
        choices=["static", "graph"],
        default=None,
        help="Package coupling source for the overview"
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Check every diagram's DOT syntax with pydot"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: logging.level)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Directory holding apiloom.yaml"
    )
    return parser


def apply_arguments(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command line options win over the configuration file."""
    diagrams = settings.diagrams.model_copy()
    if args.output_dir:
        diagrams.output_dir = args.output_dir
    if args.no_package_diagram:
        diagrams.package_diagram = False
    if args.coupling:
        diagrams.coupling = args.coupling
    if args.validate:
        diagrams.validate_output = True

    logging_settings = settings.logging.model_copy()
    if args.log_level:
        logging_settings.level = args.log_level

    return settings.model_copy(update={
        "diagrams": diagrams,
        "categories": list(settings.categories) + [list(spec) for spec in args.category],
        "logging": logging_settings,
    })


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for apiloom."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(Path(args.config) if args.config else None)
    except ConfigError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(str(e))
        return 1

    settings = apply_arguments(settings, args)
    setup_logging(settings.logging.level)
    logger.info(f"Starting apiloom - descriptors: {args.descriptors}")

    try:
        descriptors = load_descriptors(args.descriptors)
    except DescriptorError as e:
        logger.error(str(e))
        return 1

    service = DiagramService(descriptors, settings)
    result = service.generate_all()
    if result.aborted:
        logger.error("Diagram generation aborted, no files written")
        return 1

    try:
        service.write(result, settings.diagrams.output_dir)
    except OSError as e:
        logger.error(f"Cannot write diagrams to {settings.diagrams.output_dir}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
