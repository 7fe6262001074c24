#!/usr/bin/env python3
"""Debug script to inspect how a piece of SSML is scanned and built."""

import sys
from pathlib import Path

from justssml import EnterTag, ExitTag, ParseError, parse_ssml, scan


def debug_markup(markup):
    print(f"Input: {markup!r}")

    print("\nTokens:")
    try:
        for token in scan(markup):
            print(f"  {token!r}")
    except ParseError as exc:
        print(f"\n!!! SCAN ERROR: {exc} !!!")
        return

    try:
        document = parse_ssml(markup)
    except ParseError as exc:
        print(f"\n!!! PARSE ERROR: {exc!r} !!!")
        print(f"  {exc}")
        return

    print(f"\nText: {document.get_text()!r}")
    print("\nEvents:")
    depth = 0
    for event in document.events():
        if isinstance(event, ExitTag):
            depth -= 1
        if isinstance(event, (EnterTag, ExitTag)):
            tag = document.tag_at(event.index)
            label = "enter" if isinstance(event, EnterTag) else "exit "
            print(f"  {'  ' * depth}{label} {tag!r} {tag.attributes!r}")
        else:
            print(f"  {'  ' * depth}text  {document.text_of(event.span)!r}")
        if isinstance(event, EnterTag):
            depth += 1


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python debug_scanner.py <file.ssml | ->")
        print("       python debug_scanner.py --markup '<speak>Hello <break/> world</speak>'")
        sys.exit(1)

    if sys.argv[1] == "--markup":
        debug_markup(sys.argv[2])
    elif sys.argv[1] == "-":
        debug_markup(sys.stdin.read())
    else:
        debug_markup(Path(sys.argv[1]).read_text(encoding="utf-8"))
