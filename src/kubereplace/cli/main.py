#!/usr/bin/env python3
"""
KUBEREPLACE CLI
---------------
Command-line front end for the replacement engine.

    kubereplace replace TRANSFORMER PATH [PATH ...] [--in-place] [--diff]
    kubereplace version [--kubeconfig FILE] [--context NAME]

Author: KubeReplace Team
Date: 2026-10-19
"""

import sys
import logging
import argparse
from pathlib import Path

from rich.console import Console

from kubereplace.cli.formatter import KubeFormatter
from kubereplace.cli.version import build_version_client, print_versions
from kubereplace.config.transformer import load_transformer_file
from kubereplace.core.engine import ReplacementEngine
from kubereplace.core.errors import ReplacementError
from kubereplace.core.runner import ManifestRunner

# Diagnostics go to stderr so a transformed stream on stdout stays clean
console = Console(stderr=True)


class KubeReplaceCLI:
    """
    Translates user commands into engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="kubereplace",
            description="KubeReplace - declarative field replacement for Kubernetes manifests",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = KubeFormatter(console)
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("--log-level", default="WARNING",
                                 choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                                 help="Logging verbosity (default: WARNING)")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        replace_parser = subparsers.add_parser("replace", help="Apply a ReplacementTransformer to manifests")
        replace_parser.add_argument("config", help="Path to the ReplacementTransformer YAML")
        replace_parser.add_argument("paths", nargs="+", help="Manifest files or directories")
        replace_parser.add_argument("--ext", default=".yaml", help="File extension filter (default: .yaml)")
        replace_parser.add_argument("--in-place", action="store_true", help="Write results back to the files")
        replace_parser.add_argument("--no-backup", action="store_true", help="Skip backups for in-place writes")
        replace_parser.add_argument("--diff", action="store_true", help="Show a diff per changed file")
        replace_parser.add_argument("-o", "--output", help="Write the transformed stream to this file")

        version_parser = subparsers.add_parser("version", help="Show client and cluster versions")
        version_parser.add_argument("--kubeconfig", help="Path to a kubeconfig file")
        version_parser.add_argument("--context", help="Kubeconfig context to use")

    def _run_replace(self, args: argparse.Namespace) -> int:
        try:
            transformer = load_transformer_file(args.config)
            runner = ManifestRunner(ReplacementEngine(transformer.replacements))
            result = runner.run(args.paths, extension=args.ext,
                                dry_run=not args.in_place, backup=not args.no_backup)
        except (ReplacementError, OSError) as e:
            self.formatter.print_error(str(e))
            return 1

        if not result.success:
            self.formatter.print_error(result.error)
            return 1

        if args.diff:
            for report in result.reports:
                if not report["modified"]:
                    continue
                self.formatter.display_diff(report["original"], report["content"], report["file_path"])

        if args.in_place:
            self.formatter.print_final_table(result.reports)
            self.formatter.print_summary(runner.generate_summary(result.reports))
        elif args.output:
            Path(args.output).write_text(result.output, encoding="utf-8")
        elif not args.diff:
            sys.stdout.write(result.output)

        return 0 if all(r["success"] for r in result.reports) else 1

    def _run_version(self, args: argparse.Namespace) -> int:
        print_versions(sys.stdout, build_version_client(args.kubeconfig, args.context))
        return 0

    def run(self, argv=None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        logging.basicConfig(level=getattr(logging, args.log_level), stream=sys.stderr)

        if args.command == "replace":
            return self._run_replace(args)
        if args.command == "version":
            return self._run_version(args)
        self.parser.print_help()
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubeReplaceCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
