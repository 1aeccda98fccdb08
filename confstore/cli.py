# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for confstore.

Commands:

    show: Load a configuration and print it
    copy: Load from one location and save to another (optionally converting)
    merge: Deep-merge several locations and save the result

Example:
    Print a remote config as YAML:
        ```bash
        $ confstore show https://config.example.com/app.json --output-format yaml
        ```

    Convert a YAML file to JSON:
        ```bash
        $ confstore copy settings.yaml settings.json --format yaml
        ```

    Merge org defaults and local overrides:
        ```bash
        $ confstore merge merged.json defaults.json local.json
        ```

Exit Codes:

- 0: Success
- 1: Error (unknown path, I/O, HTTP or format failure)

Note:
    --format auto tries JSON first and then YAML. Verbose mode prints a
    traceback on errors.

"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
import sys

from confstore.codecs import Codec, CodecGroup, JsonCodec, available_codecs, get_codec
from confstore.core import default_provider, load_layered
from confstore.exceptions import ConfStoreError
from confstore.logging import get_logger, set_global_logger
from confstore.settings import ClientConfig, Options


def _input_codec(name: str) -> Codec:
    if name == "auto":
        return CodecGroup(get_codec("json"), get_codec("yaml"))
    return get_codec(name)


def _output_codec(name: str) -> Codec:
    if name == "json":
        return JsonCodec(indent=2)
    return get_codec(name)


def _options(args: argparse.Namespace, codec: Codec) -> Options:
    return Options(http_client=ClientConfig(timeout=args.timeout), codec=codec)


def _report_error(args: argparse.Namespace, err: Exception) -> int:
    print(f"Error: {err}", file=sys.stderr)
    if args.verbose or args.debug:
        import traceback

        traceback.print_exc()
    return 1


def cmd_show(args: argparse.Namespace) -> int:
    """Handler for 'confstore show' command.

    Loads the configuration at args.path and prints it re-encoded with the
    output format (pretty JSON by default).

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        value = default_provider(_options(args, _input_codec(args.format))).load(
            args.path
        )
        text = _output_codec(args.output_format).marshal(value).decode("utf-8")
    except ConfStoreError as err:
        return _report_error(args, err)

    print(text.rstrip("\n"))
    return 0


def cmd_copy(args: argparse.Namespace) -> int:
    """Handler for 'confstore copy' command.

    Loads args.source with the input format and saves it to
    args.destination with the output format. Source and destination can be
    any mix of local paths and URLs.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        logger.step(1, 2, f"Loading {args.source}")
        value = default_provider(_options(args, _input_codec(args.format))).load(
            args.source
        )
        logger.step(2, 2, f"Saving {args.destination}")
        default_provider(_options(args, _output_codec(args.output_format))).save(
            args.destination, value
        )
    except ConfStoreError as err:
        return _report_error(args, err)

    print(f"[SUCCESS] Copied {args.source} -> {args.destination}")
    return 0


def cmd_merge(args: argparse.Namespace) -> int:
    """Handler for 'confstore merge' command.

    Deep-merges args.sources in order (later wins, lists replaced) and saves
    the result to args.destination.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        logger.step(1, 2, f"Merging {len(args.sources)} layer(s)")
        merged = load_layered(
            args.sources, options=_options(args, _input_codec(args.format))
        )
        logger.step(2, 2, f"Saving {args.destination}")
        default_provider(_options(args, _output_codec(args.output_format))).save(
            args.destination, merged
        )
    except ConfStoreError as err:
        return _report_error(args, err)

    print(f"[SUCCESS] Merged {len(args.sources)} layer(s) into {args.destination}")
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    formats = available_codecs()
    parser.add_argument(
        "-f",
        "--format",
        choices=["auto", *formats],
        default="auto",
        help="Input format (default: auto = JSON, then YAML)",
    )
    parser.add_argument(
        "-o",
        "--output-format",
        choices=formats,
        default="json",
        help="Output format (default: json, pretty-printed)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="HTTP request timeout in seconds (default: 30)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )


def _package_version() -> str:
    try:
        return version("confstore")
    except PackageNotFoundError:
        from confstore import __version__

        return __version__


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the confstore CLI.

    This function is registered as the 'confstore' console script in
    pyproject.toml.

    Args:
        argv: Arguments to parse instead of sys.argv (used by tests).
    """
    parser = argparse.ArgumentParser(
        prog="confstore",
        description="Load and save configuration from local files or HTTP(S) URLs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"confstore {_package_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'show' command
    parser_show = subparsers.add_parser(
        "show",
        help="Load a configuration and print it",
        description="Load a local file, file:// URI or http(s) URL and print its contents.",
    )
    parser_show.add_argument("path", help="Local path, file:// URI or http(s) URL")
    _add_common_arguments(parser_show)
    parser_show.set_defaults(func=cmd_show)

    # 'copy' command
    parser_copy = subparsers.add_parser(
        "copy",
        help="Copy a configuration between locations",
        description="Load a configuration and save it elsewhere, optionally converting its format.",
    )
    parser_copy.add_argument("source", help="Location to read")
    parser_copy.add_argument("destination", help="Location to write")
    _add_common_arguments(parser_copy)
    parser_copy.set_defaults(func=cmd_copy)

    # 'merge' command
    parser_merge = subparsers.add_parser(
        "merge",
        help="Deep-merge configurations and save the result",
        description="Deep-merge the sources in order (later wins, lists replaced) and save to destination.",
    )
    parser_merge.add_argument("destination", help="Location to write")
    parser_merge.add_argument("sources", nargs="+", help="Locations to merge, in order")
    _add_common_arguments(parser_merge)
    parser_merge.set_defaults(func=cmd_merge)

    # Parse and dispatch
    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
