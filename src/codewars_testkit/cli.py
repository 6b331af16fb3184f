from typing import List, Optional
import contextlib
import sys
import typer
from .config import load_config, AppConfig
from .prettifier import NamePrettifier
from .runners.runner import TestRunner
from .reporters.codewars import CodewarsFormatter

app = typer.Typer(add_completion=False, help="Codewars Testkit - run tests and report them in the Codewars output format")

@app.command()
def run(
    targets: List[str] = typer.Argument(..., help="Test modules to run, as dotted names or .py paths"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config YAML"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Write the event stream to this file instead of stdout"),
    list_tests: bool = typer.Option(False, "--list", help="List tests without running"),
):
    cfg: AppConfig = load_config(config)
    if out:
        cfg.output.path = out

    with contextlib.ExitStack() as stack:
        stream = sys.stdout
        if cfg.output.path:
            stream = stack.enter_context(open(cfg.output.path, "w", encoding="utf-8"))
        runner = TestRunner(cfg, [CodewarsFormatter(stream)])

        try:
            if list_tests:
                for t in targets:
                    for tc in runner.discover(t).cases():
                        typer.echo(tc.id)
                raise typer.Exit(code=0)
            result = runner.run(*targets)
        except ImportError as e:
            typer.echo(f"Cannot load tests: {e}", err=True)
            raise typer.Exit(code=2)

    runner.log.info("Done. %d passed, %d failed, %d errors, %d skipped.",
                    result.passed, result.failed, result.errored, result.skipped)
    raise typer.Exit(code=0 if result.successful else 1)

@app.command()
def prettify(
    names: List[str] = typer.Argument(..., help="Test method or class names"),
    suite: bool = typer.Option(False, "--suite", help="Treat names as test class names"),
):
    prettifier = NamePrettifier()
    for name in names:
        typer.echo(prettifier.prettify_test_class(name) if suite else prettifier.prettify_test_method(name))
