"""CLI entry point for reporting module."""

import argparse
import asyncio
import logging
import sys

from jobtracker.core.config import settings
from jobtracker.reporting.workflow import FORMAT_CHOICES, generate_report


def main():
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Generate job search analytics reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # PDF for a saved configuration
  python -m jobtracker.reporting --config-id 3 --user alice

  # Every format into a custom directory
  python -m jobtracker.reporting --config-id 3 --user alice --format all --output-dir /tmp/reports

  # Quick console table view
  python -m jobtracker.reporting --config-id 1 --user alice --format table
        """
    )

    parser.add_argument(
        "--config-id",
        type=int,
        required=True,
        help="Saved report configuration or template id"
    )

    parser.add_argument(
        "--user",
        required=True,
        help="User whose jobs the report covers"
    )

    parser.add_argument(
        "--format",
        choices=FORMAT_CHOICES,
        default="pdf",
        help="Output format (default: pdf)"
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help=f"Output directory (default: {settings.output_dir})"
    )

    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    try:
        output_files = asyncio.run(generate_report(
            config_id=args.config_id,
            user_id=args.user,
            output_format=args.format,
            output_dir=args.output_dir,
        ))
    except KeyboardInterrupt:
        print("\n\nReport generation cancelled.")
        sys.exit(1)
    except Exception as e:
        print(f"\n\nError: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)

    if not output_files and args.format != "table":
        sys.exit(1)


if __name__ == "__main__":
    main()
