"""Command-line entry point: PDF -> directory of numbered JPEGs.

    $ pdftoimg -f my.pdf -o my_dir -s 1 -e 10 -a=true
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_settings
from .errors import ConfigError, ConversionError
from .pipeline.scheduler import convert
from .pipeline.schemas import ConversionRequest

LOGGER = logging.getLogger("pdftoimg.cli")

USAGE = "for options: $ pdftoimg -h\nrequires at least a pdf file path.\n$ pdftoimg -f my_pdf.pdf"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _parse_bool(value: str) -> bool:
    text = value.strip().lstrip("=").lower()
    if text in {"1", "true", "t", "yes", "on"}:
        return True
    if text in {"0", "false", "f", "no", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def build_parser(defaults) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdftoimg",
        description="Take a PDF file and produce a directory of JPEG images, one per page.",
    )
    parser.add_argument("-f", dest="source", type=Path, default=None, help="pdf input file path")
    parser.add_argument("-o", dest="output_dir", type=Path, default=Path(defaults.output_dir), help="name of output directory")
    parser.add_argument("-s", dest="start_page", type=int, default=defaults.start_page, help="the starting page to convert")
    parser.add_argument("-e", dest="end_page", type=int, default=defaults.end_page, help="the ending page to convert (-1 is all)")
    parser.add_argument(
        "-a",
        dest="append",
        type=_parse_bool,
        nargs="?",
        const=True,
        default=defaults.append,
        help="add files to directory without removing old ones",
    )
    parser.add_argument(
        "-c",
        dest="chunk_size",
        type=int,
        default=defaults.chunk_size,
        help="the chunk size to process before unloading the doc (bounds renderer memory)",
    )
    parser.add_argument("--dpi", type=int, default=defaults.dpi, help="render resolution")
    parser.add_argument(
        "--progress-every",
        type=int,
        default=defaults.progress_every,
        help="redraw the progress line every N pages (always at chunk end)",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML file overriding the packaged defaults")
    return parser


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {level_name}")
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: Optional[List[str]] = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        raise SystemExit(USAGE)

    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", type=Path, default=None)
    known, _ = pre.parse_known_args(argv)

    try:
        settings = load_settings(known.config)
        _configure_logging(settings.log_level)
    except ConfigError as exc:
        raise SystemExit(f"error: {exc}")

    args = build_parser(settings).parse_args(argv)

    try:
        if args.source is None:
            raise ConfigError("requires a pdf file path (-f)")
        request = ConversionRequest(
            source=args.source,
            output_dir=args.output_dir,
            start_page=args.start_page,
            end_page=args.end_page,
            append=args.append,
            chunk_size=args.chunk_size,
            dpi=args.dpi,
            progress_every=args.progress_every,
        )
        result = convert(request)
    except ConversionError as exc:
        LOGGER.error("Conversion failed: %s", exc)
        raise SystemExit(1)

    LOGGER.info("Conversion summary: %s", result.to_dict())
    print(f"conversion took: {result.elapsed:.3f}s")
    print("done! \U0001f64c")


if __name__ == "__main__":
    main()
