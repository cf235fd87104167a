#!/usr/bin/env python3
"""
Word Stamp - render styled text to PNG images

Simple usage:
    python stamp.py "Hello world"                         # Writes content.png
    python stamp.py "Hello !{word}!" --words names.words  # Writes content_images.zip
    python stamp.py "I was running" --style verbs.style   # Apply style rules
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from word_stamp.cli import app

if __name__ == "__main__":
    app()
