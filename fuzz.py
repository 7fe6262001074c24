#!/usr/bin/env python3
"""
Random fuzzer for the SSML parser.

Generates a mix of valid and malformed SSML. A ParseError is an accepted
outcome; any other exception is a crash. Documents that do parse are checked
against the structural guarantees of the document model:

- tag indices follow pre-order and parents point backwards
- child spans nest inside their parent and do not overlap their siblings
- the event stream rebuilds the text and every span
- writing the document back out and re-parsing it gives an equal document
"""

import argparse
import random
import string
import sys
import time
import traceback

from justssml import EnterTag, ExitTag, ParseConfig, ParseError, parse_ssml, to_ssml

STANDARD_TAGS = [
    "p", "s", "w", "token", "voice", "lang", "prosody", "emphasis", "say-as", "phoneme",
    "sub", "break", "mark", "audio", "desc", "lookup", "metadata", "meta", "lexicon",
]
CUSTOM_TAGS = ["mstts:express-as", "mstts:silence", "amazon:effect", "bookmark", "x", "vendor"]
EMPTY_TAGS = ["break", "mark"]

# Attributes that decode successfully, so that nesting gets exercised past attribute checks.
GOOD_ATTRIBUTES = {
    "voice": ['gender="female"', 'name="Anna"', 'languages="en-US fr:ca"'],
    "lang": ['xml:lang="de"'],
    "prosody": ['rate="fast"', 'pitch="+10%"', 'volume="-3dB"', 'contour="(0%,+20Hz) (50%,x-high)"'],
    "emphasis": ['level="strong"', ""],
    "say-as": ['interpret-as="cardinal"', 'interpret-as="date" format="mdy"'],
    "phoneme": ['ph="t&#x259;mei&#x325;&#x27E;ou&#x325;" alphabet="ipa"'],
    "sub": ['alias="World Wide Web Consortium"'],
    "break": ['time="500ms"', 'strength="x-weak"', ""],
    "mark": ['name="here"'],
    "audio": ['src="beep.wav"', 'src="https://example.com/a.mp3" clipBegin="1s"'],
    "lookup": ['ref="pls"'],
    "meta": ['name="author" content="me"'],
    "lexicon": ['uri="lex.pls" xml:id="pls"'],
}

BAD_ATTRIBUTES = [
    'time="1e3ms"', 'rate="-5%"', 'contour="(0%,+20Hz)(10%,+30Hz)"', 'src="has space.wav"',
    'level="loud"', 'interpret-as="string"', 'variant="0"', 'version="2.0"', 'pitch="20dB"',
    'name="a" name="b"', "unquoted=value", 'a="1"b="2"', 'x="<"',
]

ENTITIES = [
    "&amp;", "&lt;", "&gt;", "&quot;", "&apos;", "&#233;", "&#x1F600;",
    "&", "&amp", "&nbsp;", "&#0;", "&#xD800;", "&#x110000;", "&#;", "&unknown;",
]

TEXT_CHARS = string.ascii_letters + string.digits + "     .,!?'-"
UNICODE_TEXT = ["é", "ü", "ß", "東京", "\U0001F600", "\u2019", "\u200b", "\u00a0"]


def random_text(min_len=0, max_len=30):
    """Generate random text with occasional unicode and entities."""
    parts = []
    for _ in range(random.randint(min_len, max_len)):
        roll = random.random()
        if roll < 0.05:
            parts.append(random.choice(UNICODE_TEXT))
        elif roll < 0.08:
            parts.append(random.choice(ENTITIES))
        else:
            parts.append(random.choice(TEXT_CHARS))
    return "".join(parts)


def random_whitespace():
    return "".join(random.choices([" ", "\t", "\n", "\r\n", ""], k=random.randint(0, 4)))


def fuzz_attributes(name):
    """Mostly valid attributes for the tag, sometimes a broken one."""
    if random.random() < 0.1:
        return " " + random.choice(BAD_ATTRIBUTES)
    choices = GOOD_ATTRIBUTES.get(name)
    if not choices:
        if random.random() < 0.3:
            return f' data="{random_text(0, 8)}"'
        return ""
    attrs = random.choice(choices)
    return " " + attrs if attrs else ""


def fuzz_tag_name():
    roll = random.random()
    if roll < 0.75:
        return random.choice(STANDARD_TAGS)
    if roll < 0.95:
        return random.choice(CUSTOM_TAGS)
    return random.choice(["", "1p", "-x", "p q", "speak"])


def fuzz_element(depth=0, max_depth=6):
    """Generate one element with random content, occasionally malformed."""
    name = fuzz_tag_name()
    attrs = fuzz_attributes(name)
    if name in EMPTY_TAGS or random.random() < 0.1:
        return f"<{name}{attrs}{random_whitespace()}/>"
    content = fuzz_content(depth + 1, max_depth)
    roll = random.random()
    if roll < 0.03:
        return f"<{name}{attrs}>{content}"
    if roll < 0.06:
        return f"<{name}{attrs}>{content}</{fuzz_tag_name()}>"
    return f"<{name}{attrs}>{content}</{name}{random_whitespace()}>"


def fuzz_comment():
    comments = [
        f"<!--{random_text(0, 20)}-->",
        "<!---->",
        "<!-- a -- b -->",
        "<!-- unterminated",
        "<!-- <p>not a tag</p> -->",
    ]
    return random.choice(comments)


def fuzz_cdata():
    return random.choice(
        [
            f"<![CDATA[{random_text(0, 20)}]]>",
            "<![CDATA[<speak>]]>",
            "<![CDATA[unterminated",
        ]
    )


def fuzz_processing_instruction():
    return random.choice(["<?vendor hint?>", "<?xml-stylesheet href='x'?>", "<?unterminated"])


def fuzz_content(depth=0, max_depth=6):
    parts = []
    for _ in range(random.randint(0, 5)):
        generator = random.choices(
            [random_text, fuzz_comment, fuzz_cdata, fuzz_processing_instruction, None],
            weights=[40, 4, 3, 2, 0 if depth >= max_depth else 30],
        )[0]
        if generator is None:
            parts.append(fuzz_element(depth, max_depth))
        else:
            parts.append(generator())
    return "".join(parts)


def fuzz_prolog():
    return random.choice(
        [
            "",
            '<?xml version="1.0"?>\n',
            '<?xml version="1.0" encoding="UTF-8"?>\n<!DOCTYPE speak SYSTEM "synthesis.dtd">\n',
            "\ufeff",
            '<!DOCTYPE speak [<!ENTITY x "y">]>',
        ]
    )


def generate_fuzzed_ssml():
    """Generate a complete fuzzed SSML document."""
    prolog = fuzz_prolog()
    root_attrs = random.choice(
        [
            "",
            ' version="1.1"',
            ' version="1.0" xmlns="http://www.w3.org/2001/10/synthesis" xml:lang="en-US"',
            ' xmlns:mstts="https://www.w3.org/2001/mstts"',
        ]
    )
    body = fuzz_content()
    roll = random.random()
    if roll < 0.03:
        return prolog + body
    if roll < 0.06:
        return f"{prolog}<speak{root_attrs}>{body}</speak><speak/>"
    if roll < 0.08:
        return f"{prolog}stray<speak{root_attrs}>{body}</speak>"
    return f"{prolog}{random_whitespace()}<speak{root_attrs}>{body}</speak>{random_whitespace()}"


def check_invariants(document, config):
    """Raise AssertionError when the document breaks a structural guarantee."""
    tags = document.tags()
    text = document.get_text()
    for index, tag in enumerate(tags):
        assert tag.index == index, f"tag {tag!r} has index {tag.index}, expected {index}"
        assert 0 <= tag.span.start <= tag.span.end <= len(text), f"span out of range on {tag!r}"
        if tag.parent is not None:
            assert tag.parent < index, f"parent of {tag!r} does not precede it"
        previous_end = tag.span.start
        for child in tag.children:
            assert child.parent == index, f"{child!r} does not point back to {tag!r}"
            assert tag.span.contains(child.span), f"{child!r} escapes {tag!r}"
            assert child.span.start >= previous_end, f"{child!r} overlaps its previous sibling"
            previous_end = child.span.end

    pieces = []
    starts = {}
    for event in document.events():
        if isinstance(event, EnterTag):
            starts[event.index] = sum(len(piece) for piece in pieces)
        elif isinstance(event, ExitTag):
            span = tags[event.index].span
            end = sum(len(piece) for piece in pieces)
            assert (starts.pop(event.index), end) == (span.start, span.end), f"events disagree on {tags[event.index]!r}"
        else:
            pieces.append(document.text_of(event.span))
    assert "".join(pieces) == text, "events do not rebuild the text"

    reparsed = parse_ssml(to_ssml(document), config)
    assert reparsed == document, "writing and re-parsing changed the document"


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against justssml."""
    if seed is not None:
        random.seed(seed)

    configs = [
        ParseConfig(),
        ParseConfig(expand_substitutions=False),
        ParseConfig(custom_tag_classifier=lambda name: not name.startswith("mstts:")),
    ]

    crashes = []
    hangs = []
    accepted = 0
    rejected = 0

    print(f"Fuzzing justssml with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        ssml = generate_fuzzed_ssml()
        config = random.choice(configs)

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        start = time.perf_counter()
        try:
            document = parse_ssml(ssml, config)
            check_invariants(document, config)
            accepted += 1
        except ParseError:
            rejected += 1
        except Exception as e:
            crashes.append(
                {
                    "test_num": i,
                    "ssml": ssml,
                    "error": f"{type(e).__name__}: {e}",
                    "traceback": traceback.format_exc(),
                }
            )
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
        elapsed = time.perf_counter() - start

        if elapsed > 5.0:
            hangs.append({"test_num": i, "ssml": ssml, "time": elapsed})
            if verbose:
                print(f"  HANG: Test {i} took {elapsed:.2f}s")

    elapsed_total = time.time() - start_time

    print(f"\n{'=' * 60}")
    print("FUZZING RESULTS: justssml")
    print(f"{'=' * 60}")
    print(f"Total tests:    {num_tests}")
    print(f"Accepted:       {accepted}")
    print(f"Rejected:       {rejected}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests / elapsed_total:.1f}")

    if crashes:
        print(f"\n{'=' * 60}")
        print("CRASH DETAILS:")
        print(f"{'=' * 60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  SSML: {crash['ssml'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if hangs:
        print(f"\n{'=' * 60}")
        print("HANG DETAILS:")
        print(f"{'=' * 60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  SSML: {hang['ssml'][:200]!r}...")

    if save_failures and (crashes or hangs):
        filename = f"fuzz_failures_justssml_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write("Fuzzing results for justssml\n")
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"SSML:\n{crash['ssml']}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"SSML:\n{hang['ssml']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the SSML parser with valid and invalid input")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed SSML documents (no parsing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i + 1} ===")
            print(generate_fuzzed_ssml())
            print()
        return

    success = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
