"""
Command-line interface for text translation

    python translate.py -i input.txt -o output.txt -sl English -tl Spanish
    python translate.py --text "Hello world" -tl French --country France
"""
import sys

from translation_agent.cli import main


if __name__ == "__main__":
    sys.exit(main())
