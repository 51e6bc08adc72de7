"""sexpy entrypoint module exposing the public API and CLI."""

import argparse
import logging
import os
import subprocess
import sys
from typing import List, Optional

import sexpy_lang
from sexpy_lang import (
    ConsoleIO,
    EmitError,
    IOHandler,
    ParseError,
    RunnerConfig,
    SexpCompiler,
    SexpyError,
    compile_source,
    lisp,
    sidecar_path,
)

__all__ = [
    "SexpCompiler",
    "SexpyError",
    "ParseError",
    "EmitError",
    "RunnerConfig",
    "compile_source",
    "lisp",
    "run_repl",
    "compile_file",
    "run_file",
    "main",
]

logger = logging.getLogger("sexpy")

_PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(sexpy_lang.__file__)))


def run_repl(compiler: SexpCompiler, io: Optional[IOHandler] = None) -> None:
    io = io if io is not None else ConsoleIO()
    io.emit("sexpy repl (type Ctrl-D to exit)")
    while True:
        line = io.read_input("> ")
        if line is None:
            break
        if not line.strip():
            continue
        try:
            io.emit(compiler.compile(line))
        except SexpyError as e:
            io.emit(f"Error: {e}")


def _write_sidecar(compiler: SexpCompiler, path: str, config: RunnerConfig) -> str:
    if not os.path.isfile(path):
        print(f"Error: file not found: {path}")
        sys.exit(1)
    try:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
        module = compiler.render_module(source, origin=path)
    except (SexpyError, UnicodeDecodeError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    out_path = sidecar_path(path, config.extension)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(module)
    logger.debug("wrote %d bytes to %s", len(module), out_path)
    print(f"Wrote {out_path}")
    return out_path


def compile_file(compiler: SexpCompiler, path: str, config: RunnerConfig) -> str:
    return _write_sidecar(compiler, path, config)


def run_file(compiler: SexpCompiler, path: str, config: RunnerConfig) -> None:
    out_path = _write_sidecar(compiler, path, config)
    cmd = [config.python, out_path]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (_PACKAGE_ROOT, env.get("PYTHONPATH")) if p
    )
    logger.debug("running %s", " ".join(cmd))
    try:
        completed = subprocess.run(
            cmd, capture_output=True, text=True, env=env, timeout=config.timeout
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        print(f"Failed to run interpreter: {e}")
        print(f"You can run this yourself: {' '.join(cmd)}")
        sys.exit(1)
    if completed.stdout:
        sys.stdout.write(completed.stdout)
    if completed.stderr:
        sys.stderr.write(completed.stderr)
    if completed.returncode:
        sys.exit(completed.returncode)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sexpy", description="Compile s-expressions into Python expressions"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log compiler activity to stderr"
    )
    commands = parser.add_subparsers(dest="command", metavar="command")
    run = commands.add_parser("run", help="compile and run a .lisp file")
    run.add_argument("file", help="Path to the source file")
    comp = commands.add_parser("compile", help="emit a .py file from input")
    comp.add_argument("file", help="Path to the source file")
    commands.add_parser("repl", help="interactive REPL (prints generated Python)")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = "DEBUG" if args.verbose else os.environ.get("SEXPY_LOG_LEVEL", "WARNING")
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return

    compiler = SexpCompiler()
    try:
        config = RunnerConfig.from_env()
    except SexpyError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.command == "repl":
        run_repl(compiler)
    elif args.command == "compile":
        compile_file(compiler, args.file, config)
    elif args.command == "run":
        run_file(compiler, args.file, config)


if __name__ == "__main__":
    main()
