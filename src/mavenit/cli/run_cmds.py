# src/mavenit/cli/run_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from mavenit.config import load_config
from mavenit.exceptions import ConfigurationError, MavenItError
from mavenit.lifecycle import MavenItLifecycle
from mavenit.models import CacheMode, CaseDirectives, InvocationDirectives, SuiteDirectives, TestUnitIdentity
from mavenit.results import MavenExecutionResult
from mavenit.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.run")


def _render_result(identity: TestUnitIdentity, result: MavenExecutionResult) -> None:
    # Rendered to a string and echoed so CliRunner captures it.
    click.echo(pretty_repr(result, expand_all=True))
    click.echo(f"{identity}: {result.outcome.value} (exit code {result.exit_code})")


@click.command(name="run")
@click.argument("suite")
@click.argument("case")
@click.option("-g", "--goal", "goals", multiple=True, help="Maven goal; may be repeated.")
@click.option("-P", "--profile", "profiles", multiple=True, help="Profile to activate; may be repeated.")
@click.option("-X", "--debug", is_flag=True, help="Run Maven with debug output.")
@click.option("-O", "--option", "options", multiple=True, help="Extra Maven command line option.")
@click.option(
    "--cache",
    "cache_mode",
    type=click.Choice([m.value for m in CacheMode], case_sensitive=False),
    default=CacheMode.PER_CASE.value,
    show_default=True,
    help="Scope of the local artifact repository.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds after which Maven is killed.",
)
@click.option(
    "-c",
    "--config-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("pyproject.toml"),
    show_default=True,
    envvar="MAVENIT_CONFIG",
    show_envvar=True,
    help="pyproject.toml holding the [tool.mavenit] table.",
)
@click.option(
    "--maven-home",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Maven installation used when MAVEN_HOME is not set.",
)
@click.pass_context
def run_cli(
    ctx: click.Context,
    suite: str,
    case: str,
    goals: tuple[str, ...],
    profiles: tuple[str, ...],
    debug: bool,
    options: tuple[str, ...],
    cache_mode: str,
    timeout: float | None,
    config_path: Path,
    maven_home: Path | None,
):
    """Run Maven for the fixture SUITE/CASE exactly like a test unit would.

    SUITE is the qualified suite name (e.g. tests.test_it.TestBasic), CASE the
    test case name. Exits 1 when Maven reports a failure.
    """
    identity = TestUnitIdentity(suite=suite, case=case)
    directives = InvocationDirectives(
        suite=SuiteDirectives(cache_mode=cache_mode),
        case=CaseDirectives(goals=goals, profiles=profiles, debug=debug, options=options, timeout=timeout),
    )
    log.info("Executing 'run' command", unit=str(identity), config_path=str(config_path))

    try:
        config = load_config(config_path, maven_home=maven_home)
        result = MavenItLifecycle(config).run(identity, directives)
    except ConfigurationError as e:
        click.echo(f"Error: Configuration problem: {e}", err=True)
        ctx.exit(2)
    except MavenItError as e:
        log.error("Maven run aborted", unit=str(identity), error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(2)

    _render_result(identity, result)
    ctx.exit(0 if result.is_successful else 1)

# 🔼⚙️
