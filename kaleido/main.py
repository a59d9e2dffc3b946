import argparse
import logging
import sys

from .driver import Session
from .parser import DEFAULT_PRECEDENCE


def main(argv=None):
    ap = argparse.ArgumentParser(prog="kaleido", add_help=True)
    ap.add_argument("file", nargs="?", default=None, help="Input source file (default: stdin)")
    ap.add_argument("--emit", choices=["ll"], default=None, help="Write the final module in the given format")
    ap.add_argument("--out", default=None, help="Output path for --emit (default: output.ll)")
    ap.add_argument("--run-jit", action="store_true", help="Evaluate each top-level expression using JIT")
    ap.add_argument("--prompt", default="", help="Prompt printed before each top-level construct")
    ap.add_argument("--verbose", action="store_true", help="Log compiler internals")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(name)s] %(message)s",
    )

    if args.file:
        with open(args.file, 'r', encoding="utf-8") as f:
            source = f.read()
    else:
        source = sys.stdin

    session = Session(
        source,
        precedence=DEFAULT_PRECEDENCE,
        evaluate=args.run_jit,
        prompt=args.prompt,
        filename=args.file,
    )
    llvm_ir = session.run()

    if args.emit == "ll":
        out_path = args.out or "output.ll"
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(llvm_ir)
        print(f"\n[SUCCESS] LLVM IR written to '{out_path}'", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
