#!/usr/bin/env python
"""
Simple runner for the DarkLens renderer.
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from darklens.pipeline import run_pipeline


def main():
    parser = argparse.ArgumentParser(description='Run DarkLens renderer')
    parser.add_argument('--config', '-c', type=str, required=True,
                        help='Path to configuration file')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Suppress progress output')
    args = parser.parse_args()

    run_pipeline(args.config, verbose=not args.quiet)


if __name__ == '__main__':
    main()
