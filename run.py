#!/usr/bin/env python3
"""
Wrapper script to run the Gmail flight scanner from a source checkout
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent / 'src'
sys.path.insert(0, str(src_path))

from flight_scanner.main import main

if __name__ == '__main__':
    main()
