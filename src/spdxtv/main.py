"""Command line entry point setup.

:class:`Main` owns the argument parser of a spdxtv command and activates
logging once the command line is parsed.
"""

from __future__ import annotations

from argparse import ArgumentParser
import logging

from typing import TYPE_CHECKING

import spdxtv.log

if TYPE_CHECKING:
    from argparse import Namespace
    from typing import Optional


class Main:
    """Argument parser with the spdxtv logging options.

    :ivar args: the parsed command line, None until :meth:`parse_args`
    """

    def __init__(self, name: str):
        """Initialize Main.

        :param name: program name shown in the usage message
        """
        self.name = name
        self.argument_parser = ArgumentParser(prog=name)
        spdxtv.log.add_logging_argument_group(
            self.argument_parser, default_level=logging.INFO
        )
        self.args: Optional[Namespace] = None

    def parse_args(self, args: Optional[list[str]] = None) -> None:
        """Parse the command line and activate logging.

        :param args: arguments to parse, ``sys.argv[1:]`` by default
        """
        self.args = self.argument_parser.parse_args(args)
        spdxtv.log.activate_with_args(self.args, logging.INFO)
