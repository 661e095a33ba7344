"""
Command line interface for XML schema inference and code generation.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_PROGRESS_INTERVAL, InferenceConfig, OutputMode
from .errors import ConfigurationError, InferenceError
from .generator import generate
from .sources import describe_source, open_source
from .tree_builder import infer_schema
from .writers import write_project

logger = logging.getLogger(__name__)

_MODE_FLAGS = (
    ("conversion_code", OutputMode.CONVERSION_CODE, "-W"),
    ("struct_definitions", OutputMode.STRUCT_DEFINITIONS, "-G"),
    ("target_classes", OutputMode.TARGET_CLASSES, "-J"),
)


def setup_logging(debug: bool = False, progress: bool = False):
    """Setup logging configuration."""
    if debug:
        level = logging.DEBUG
    elif progress:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_parser() -> argparse.ArgumentParser:
    defaults = InferenceConfig()
    parser = argparse.ArgumentParser(
        description="Infer the structure of a sample XML document and generate code for it",
        prog="xml-schema-infer"
    )
    parser.add_argument(
        "source",
        nargs="?",
        help="XML file to read (or URL with -u); may be gzip or bzip2 compressed"
    )

    # Output modes
    parser.add_argument(
        "-W", dest="conversion_code", action="store_true",
        help="Write a Go program converting the XML to JSON or XML to stdout"
    )
    parser.add_argument(
        "-G", dest="struct_definitions", action="store_true",
        help="Write only the generated Go structs to stdout"
    )
    parser.add_argument(
        "-J", dest="target_classes", action="store_true",
        help="Generate a Maven project of Java/JAXB classes"
    )

    # Input
    parser.add_argument(
        "-c", dest="stdin", action="store_true",
        help="Read XML from standard input"
    )
    parser.add_argument(
        "-u", dest="url", action="store_true",
        help="Interpret the source argument as a URL"
    )

    # Naming and typing
    parser.add_argument(
        "-e", dest="name_prefix", default=defaults.name_prefix,
        help=f"Prefix for generated type names; must start with a capital (default: {defaults.name_prefix})"
    )
    parser.add_argument(
        "-s", dest="name_suffix", default=defaults.name_suffix,
        help="Suffix for generated type names"
    )
    parser.add_argument(
        "-a", dest="attribute_prefix", default=defaults.attribute_prefix,
        help=f"Prefix for attribute field names (default: {defaults.attribute_prefix})"
    )
    parser.add_argument(
        "-t", dest="use_type", action="store_true",
        help="Infer bool/int/float types from the sample instead of treating everything as a string"
    )
    parser.add_argument(
        "-n", dest="namespace_in_json_name", action="store_true",
        help="Prefix JSON names with the XML namespace prefix followed by __"
    )
    parser.add_argument(
        "-x", dest="add_xml_name", action="store_true",
        help="Include XMLName (Space, Local) of each element in JSON"
    )
    parser.add_argument(
        "-p", dest="pretty_print", action="store_true",
        help="Pretty-print JSON in generated code"
    )

    # Java project
    parser.add_argument(
        "-D", dest="java_base_dir", default=defaults.java_base_dir,
        help=f"Base directory of the generated Maven project (default: {defaults.java_base_dir})"
    )
    parser.add_argument(
        "-k", dest="java_app_name", default=defaults.java_app_name,
        help=f"App name appended to the {defaults.java_base_package} Java package (default: {defaults.java_app_name})"
    )

    # Diagnostics
    parser.add_argument(
        "-r", dest="progress", action="store_true",
        help=f"Report progress every {DEFAULT_PROGRESS_INTERVAL} elements"
    )
    parser.add_argument(
        "-d", dest="debug", action="store_true",
        help="Enable debug logging"
    )
    return parser


def select_mode(args: argparse.Namespace) -> OutputMode:
    """Return the single output mode requested on the command line.

    Raises:
        ConfigurationError: No mode or more than one mode was selected.
    """
    selected = [(mode, flag) for dest, mode, flag in _MODE_FLAGS if getattr(args, dest)]
    if not selected:
        raise ConfigurationError("Select one output mode: -W, -G or -J")
    if len(selected) > 1:
        flags = ", ".join(flag for _, flag in selected)
        raise ConfigurationError(f"Output modes are mutually exclusive, got {flags}")
    return selected[0][0]


def validate_source(args: argparse.Namespace) -> None:
    """Check that exactly one input source was given."""
    if args.stdin:
        if args.source or args.url:
            raise ConfigurationError("-c reads standard input; do not also give a file or -u")
        return
    if not args.source:
        raise ConfigurationError("Missing XML source: give a file, a URL with -u, or -c")


def config_from_args(args: argparse.Namespace) -> InferenceConfig:
    return InferenceConfig(
        name_prefix=args.name_prefix,
        name_suffix=args.name_suffix,
        attribute_prefix=args.attribute_prefix,
        use_type=args.use_type,
        namespace_in_json_name=args.namespace_in_json_name,
        pretty_print=args.pretty_print,
        add_xml_name=args.add_xml_name,
        progress=args.progress,
        java_base_dir=args.java_base_dir,
        java_app_name=args.java_app_name,
    )


def run(args: argparse.Namespace) -> int:
    """Infer the sample's shape and write the selected output."""
    mode = select_mode(args)
    validate_source(args)
    config = config_from_args(args)
    source_name = describe_source(args.source, url=args.url, stdin=args.stdin)

    with open_source(args.source, url=args.url, stdin=args.stdin) as stream:
        result = infer_schema(stream, config)
    logger.info(
        "Read %d elements (%d distinct) from %s",
        result.element_count,
        len(result.iter_nodes()),
        source_name,
    )

    output = generate(result, config, mode, source_name)
    if mode is OutputMode.TARGET_CLASSES:
        base = write_project(output.files, config.java_base_dir)
        print(f"✓ Generated {len(output.files)} files in: {base}", file=sys.stderr)
    else:
        sys.stdout.write(output.text)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug, args.progress)

    try:
        return run(args)
    except ConfigurationError as e:
        print(f"✗ {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 2
    except InferenceError as e:
        logger.debug("Run failed", exc_info=True)
        print(f"✗ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
