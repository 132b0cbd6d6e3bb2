"""
Log Checker CLI

Command-line interface for log anomaly checks.
"""

import argparse
import sys
import logging
from pathlib import Path
from typing import List, Optional

from .analyzer import LogAnalyzer
from .detectors import RuleEngine
from .reporters import get_reporter, ConsoleReporter
from .utils import local_timezone, setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="logchecker",
        description="Log Checker - quick anomaly insights for access and auth logs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  logchecker analyze /var/log/nginx/access.log
  logchecker analyze /var/log/auth.log -f json -o report.json
  cat access.log | logchecker analyze -
  logchecker analyze access.log --brute-force-threshold 10 -v
  logchecker analyze auth.log --rules bruteforce,useragent
        """
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)"
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help="Disable colored output"
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # === Analyze Command ===
    analyze = subparsers.add_parser('analyze', help='Analyze log file(s)')

    analyze.add_argument(
        'files',
        nargs='+',
        help="Log file(s) to analyze; '-' reads standard input"
    )

    analyze.add_argument(
        '-o', '--output',
        help="Output file path"
    )

    analyze.add_argument(
        '-f', '--format',
        choices=['json', 'csv', 'console'],
        default='console',
        help="Output format (default: console)"
    )

    analyze.add_argument(
        '-r', '--rules',
        help="Comma-separated list of rules (bruteforce,errorspike,useragent,ratespike,offhours)"
    )

    analyze.add_argument(
        '--brute-force-threshold',
        type=int,
        help="Failed logins per source before alerting (default: 6)"
    )

    analyze.add_argument(
        '--error-spike-threshold',
        type=int,
        help="HTTP errors per source before alerting (default: 12)"
    )

    analyze.add_argument(
        '--rate-threshold',
        type=int,
        help="Requests per minute a source must exceed (default: 120)"
    )

    analyze.add_argument(
        '--night-threshold',
        type=int,
        help="Requests between 00:00 and 05:00 per source before alerting (default: 100)"
    )

    analyze.add_argument(
        '--local-time',
        action='store_true',
        help="Read the off-hours window in this host's timezone instead of each line's offset"
    )

    return parser


def read_input(name: str) -> str:
    """Read a log file, or standard input for '-'."""
    if name == '-':
        return sys.stdin.read()
    return Path(name).read_text(encoding='utf-8', errors='replace')


def run_analyze(args) -> int:
    """Run analyze command."""
    texts: List[str] = []
    for name in args.files:
        try:
            texts.append(read_input(name))
        except OSError as e:
            print(f"Error reading {name}: {e}", file=sys.stderr)
            return 1
        logger.info(f"Loaded {name}")

    rule_names = None
    if args.rules:
        rule_names = [name.strip() for name in args.rules.split(',') if name.strip()]

    try:
        engine = RuleEngine.with_thresholds(
            brute_force=args.brute_force_threshold,
            error_spike=args.error_spike_threshold,
            rate_spike=args.rate_threshold,
            off_hours=args.night_threshold,
            names=rule_names,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    night_tz = local_timezone() if args.local_time else None
    analyzer = LogAnalyzer(engine=engine, night_tz=night_tz)

    if len(texts) == 1:
        result = analyzer.analyze(texts[0])
    else:
        result = analyzer.analyze_many(texts)

    if args.format == 'console':
        reporter = ConsoleReporter(use_colors=not args.no_color and not args.output)
    else:
        reporter = get_reporter(args.format)

    if args.output:
        reporter.save(result, args.output)
        print(f"Report saved to: {args.output}")
    else:
        print(reporter.generate(result))

    return 1 if result.anomalies else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG

    setup_logging(log_level)

    if args.command == 'analyze':
        return run_analyze(args)

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
