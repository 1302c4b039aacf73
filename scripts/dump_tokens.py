#!/usr/bin/env python
import argparse
from pathlib import Path

from nufmt.ast import structure
from nufmt.lexer import LexContext, Lexer, dump_tokens
from nufmt.parser import parse


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump the tokens (and optionally the tree) of a Nushell file.")
    parser.add_argument("path", type=Path)
    parser.add_argument(
        "--context",
        choices=[context.value for context in LexContext],
        default=LexContext.REGULAR.value,
        help="lex the whole file in one context",
    )
    parser.add_argument("--tree", action="store_true", help="also print the parsed tree")
    args = parser.parse_args()

    text = args.path.read_text(encoding="utf-8")

    lexer = Lexer(text)
    tokens = lexer.lex(LexContext(args.context))
    dump_tokens(tokens, text, lexer.diagnostics)

    if args.tree:
        parsed = parse(text)
        print("\nTree:")
        print(structure(parsed.program))
        for diagnostic in parsed.diagnostics:
            print(f"- {diagnostic.code} {diagnostic.range.as_tuple()} {diagnostic.message}")


if __name__ == "__main__":
    main()
