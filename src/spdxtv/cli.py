"""The spdxtv command line."""

from __future__ import annotations

from dataclasses import asdict
from importlib.metadata import PackageNotFoundError, version as dist_version
from pprint import pformat
import sys

from typing import TYPE_CHECKING

import spdxtv.codec
import spdxtv.log
import spdxtv.main
from spdxtv.error import FormatError, LicenceListError, ParseError
from spdxtv.licence import LicenceConfig, LicenceList
from spdxtv.tagvalue import Formatter, TagValueConfig, lex
from spdxtv.validation import Severity, validate

if TYPE_CHECKING:
    from argparse import Namespace
    from typing import Optional
    from spdxtv.model import Document

logger = spdxtv.log.getLogger("cli")


def version() -> str:
    try:
        return dist_version("spdxtv")
    except PackageNotFoundError:  # defensive code
        return "unknown"


def read_document(filename: str, format_name: Optional[str] = None) -> Document:
    """Read a document file.

    :param filename: path to the document
    :param format_name: format of the file, guessed from its extension if None
    :raise ParseError: on invalid tag-value documents
    :raise FormatError: on other undecodable documents
    """
    if format_name is None:
        format_name = spdxtv.codec.format_from_filename(filename)
    with open(filename, "rb") as f:
        return spdxtv.codec.decode(f.read(), format_name)


def write_output(data: bytes, output: Optional[str]) -> None:
    if output is None:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()
    else:
        with open(output, "wb") as f:
            f.write(data)


def do_validate(args: Namespace) -> int:
    """Validate documents and print findings.

    :return: 0 if all documents are valid, 1 otherwise
    """
    try:
        registry = LicenceList.from_config(args.licence_list)
    except LicenceListError as err:
        logger.error(str(err))
        return 2

    invalid = 0
    for filename in spdxtv.log.progress_bar(args.files, desc="validate"):
        try:
            doc = read_document(filename, args.format)
        except ParseError as err:
            logger.error(f"{filename}: {err}", meta=err.meta)
            invalid += 1
            continue
        except (FormatError, OSError) as err:
            logger.error(f"{filename}: {err}")
            invalid += 1
            continue

        findings = validate(doc, registry)
        for finding in findings:
            location = filename if finding.meta is None else f"{filename}:{finding.meta}"
            print(f"{location}: {finding}")
        if any(f.severity == Severity.ERROR for f in findings):
            invalid += 1
            logger.warning(f"{filename} is not valid")
        else:
            logger.info(f"{filename} is valid")

    return 1 if invalid else 0


def do_format(args: Namespace) -> int:
    """Pretty-print a tag-value document, comments included."""
    config = TagValueConfig.load()
    output = open(args.output, "w") if args.output else sys.stdout
    try:
        with open(args.file) as f:
            Formatter(output).tokens(
                lex(
                    f,
                    ignore_meta=True,
                    case_sensitive=config.case_sensitive,
                )
            )
    except ParseError as err:
        logger.error(f"{args.file}: {err}", meta=err.meta)
        return 1
    except OSError as err:
        logger.error(str(err))
        return 1
    finally:
        if output is not sys.stdout:
            output.close()
    return 0


def do_convert(args: Namespace) -> int:
    """Convert a document from one format to another."""
    try:
        doc = read_document(args.file, args.source_format)
        data = spdxtv.codec.encode(doc, args.to)
    except (ParseError, FormatError, OSError) as err:
        logger.error(f"{args.file}: {err}")
        return 1
    write_output(data, args.output)
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    m = spdxtv.main.Main(name="spdxtv")
    parser = m.argument_parser
    parser.add_argument(
        "--version", help="Show spdxtv version", action="store_true"
    )
    parser.add_argument(
        "--show-config", action="store_true", help="Show spdxtv config"
    )
    parser.add_argument(
        "--licence-list",
        metavar="FILE",
        help="file listing the SPDX License List identifiers, one per line",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    validate_parser = subparsers.add_parser(
        "validate", help="validate SPDX documents"
    )
    validate_parser.add_argument("files", nargs="+", metavar="FILE")
    validate_parser.add_argument(
        "--format", help="format of the documents (default: from extension)"
    )
    validate_parser.set_defaults(func=do_validate)

    format_parser = subparsers.add_parser(
        "format", help="pretty-print a tag-value document"
    )
    format_parser.add_argument("file", metavar="FILE")
    format_parser.add_argument("-o", "--output", metavar="FILE")
    format_parser.set_defaults(func=do_format)

    convert_parser = subparsers.add_parser(
        "convert", help="convert a document to another format"
    )
    convert_parser.add_argument("file", metavar="FILE")
    convert_parser.add_argument(
        "--from",
        dest="source_format",
        help="format of the document (default: from extension)",
    )
    convert_parser.add_argument("--to", required=True, help="target format")
    convert_parser.add_argument("-o", "--output", metavar="FILE")
    convert_parser.set_defaults(func=do_convert)

    m.parse_args(argv)

    if TYPE_CHECKING:
        assert m.args is not None

    if m.args.version:
        print(version())
        return
    elif m.args.show_config:
        for section in (spdxtv.log.log_config, TagValueConfig.load(), LicenceConfig.load()):
            print(f"[{section.title}]")
            for k, v in asdict(section).items():
                print(f"{k}: {pformat(v)}")
        return
    elif m.args.command is None:
        parser.print_usage()
        sys.exit(2)

    sys.exit(m.args.func(m.args))
