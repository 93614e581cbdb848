import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional

from python_bugreport_extractor.bugreport import BugreportParser, BugreportReadError
from python_bugreport_extractor.config import load_config
from python_bugreport_extractor.plugins import BugreportAnalysisContext, PluginRepo


@dataclass
class CliArgs:
    """Data class for storing CLI arguments"""

    file_name: str
    config: Optional[str]
    header: Optional[bool]


def parse_cli(argv: Optional[List[str]] = None) -> CliArgs:
    parser = argparse.ArgumentParser(
        description="Extract memory, process, property and crash facts from a bugreport"
    )
    parser.add_argument("file_name", type=str, help="bugreport*.txt or bugreport zip")
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="TOML config file, defaults to config/config.toml",
    )
    parser.add_argument(
        "--header",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="parse the dumpstate header, overrides parse_header from the config",
    )
    args = parser.parse_args(argv)
    return CliArgs(**vars(args))


def main(argv: Optional[List[str]] = None) -> int:
    cli_args = parse_cli(argv)
    config = load_config(cli_args.config)
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parse_header = config.parse_header if cli_args.header is None else cli_args.header
    try:
        items = BugreportParser(parse_header=parse_header).parse_file(
            cli_args.file_name, encoding=config.encoding
        )
    except BugreportReadError as e:
        print(e, file=sys.stderr)
        return 1

    procrank_plugin = PluginRepo.find_by_name("ProcrankPlugin")
    if procrank_plugin is not None:
        procrank_plugin.top_n = config.top_processes

    context = BugreportAnalysisContext(items)
    PluginRepo.run_all(context)
    print(PluginRepo.report_all())
    return 0


if __name__ == "__main__":
    sys.exit(main())
