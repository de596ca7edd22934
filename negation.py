import asyncio
import sys
from pathlib import Path

from negation.negation_runtime import ScriptRunner
from negation.negation_printer import Printer
from negation.negation_serialize import serialize

DUMP_FORMATS = ("json", "yaml", "negation")


# A basic awaitable input prompt.
async def ainput(prompt: str) -> str:
    loop = asyncio.get_running_loop()
    sys.stdout.write(prompt)
    sys.stdout.flush()
    return await loop.run_in_executor(None, sys.stdin.readline)


def dump_variables(runner: ScriptRunner, fmt: str) -> str:
    if fmt == "negation":
        return Printer().pformat(runner.tables)
    return serialize(runner.tables, fmt=fmt)


def parse_args(argv):
    """Split argv into (locator, dump format)."""
    locator = None
    dump = None
    for arg in argv:
        if arg.startswith("--dump="):
            dump = arg.split("=", 1)[1].lower()
            if dump not in DUMP_FORMATS:
                print(f"Error: unknown dump format: {dump}", file=sys.stderr)
                raise SystemExit(2)
        elif arg == "-" or not arg.startswith("-"):
            locator = arg
        else:
            print(f"Error: unknown option: {arg}", file=sys.stderr)
            raise SystemExit(2)
    return locator, dump


async def run_script_file(locator: str, dump: str | None = None):
    """Run a Negation program non-interactively and exit with appropriate status."""
    runner = ScriptRunner()
    if locator == "-":
        runner.source_dir = str(Path.cwd())
        result = await runner.handle_script(sys.stdin.read())
    else:
        p = Path(locator)
        if "://" not in locator:
            if not p.is_file():
                print(f"Error: file not found: {locator}", file=sys.stderr)
                raise SystemExit(1)
            runner.source_dir = str(p.parent.resolve())
        result = await runner.handle_locator(locator if "://" in locator else str(p.resolve()))
    # Emitted text goes out exactly as produced, no separators
    sys.stdout.write(result.value)
    sys.stdout.flush()
    if result.status == 'error':
        if result.value:
            print()
        print(result.format_error(), file=sys.stderr)
        raise SystemExit(1)
    if dump:
        if result.value:
            print()
        print(dump_variables(runner, dump))


async def main(argv=None):
    """Run a program when a locator is given, otherwise start the interactive REPL."""
    argv = sys.argv[1:] if argv is None else argv
    locator, dump = parse_args(argv)
    if locator is not None:
        await run_script_file(locator, dump)
        return

    print("Negation REPL v0.1")
    print("Type 'exit' or press Ctrl+D to quit, ':vars' to list variables.")

    runner = ScriptRunner()
    runner.source_dir = str(Path.cwd())

    # REPL Loop
    while True:
        try:
            raw = await ainput(">> ")
            if raw == "":
                raise EOFError
            line = raw.rstrip("\r\n")

            if not line.strip():
                continue
            if line.strip() == "exit":
                break
            if line.strip() == ":vars":
                listing = Printer().pformat(runner.tables)
                if listing:
                    print(listing)
                continue
            if line.strip() == ":reset":
                runner.reset()
                continue

            # Each line is a statement run against the session's tables
            result = await runner.handle_script(line + "\n", framed=False)

            if result.value:
                print(result.value)

            if result.status == 'error':
                print(result.format_error(), file=sys.stderr)

        except EOFError:
            print("\nExiting.")
            break
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nExiting.")
