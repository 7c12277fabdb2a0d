import click
import functools
import logging
import traceback
import asyncio
import yaml
from pathlib import Path

from . import constants
from .config import Config
from .datacls import PluginContext
from .pipeline import build_spec, dump_pipeline
from .plugin import create_plugin
from .utils import setup_logger, parse_module_levels
from .exceptions import (
    SSRDeployError,
    ConfigurationError,
    PreconditionError,
    ProcessError,
    BuildOutputError,
    PackagingError,
)
from . import __version__


def complete_config_files(ctx, param, incomplete):
    """Auto-complete .yml and .yaml config files in current directory"""
    cwd = Path.cwd()
    yml_files = list(cwd.glob('*.yml')) + list(cwd.glob('*.yaml')) + list(cwd.glob('*.json'))
    return sorted(f.name for f in yml_files if f.name.startswith(incomplete))


def setup_logging(debug: bool, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    setup_logger(debug=debug, module_levels=parse_module_levels(log_levels), log_file=log_file)


def _abort(kind: str, e: Exception):
    logging.error(f"{kind}: {e}")
    ctx = click.get_current_context()
    if ctx.obj and ctx.obj.get('debug'):
        traceback.print_exc()
    raise click.Abort()


def handle_errors(func):
    """Decorator to handle common exceptions"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            _abort("Configuration error", e)
        except PreconditionError as e:
            _abort("Lifecycle error", e)
        except ProcessError as e:
            _abort("Command error", e)
        except (BuildOutputError, PackagingError) as e:
            _abort("Build error", e)
        except SSRDeployError as e:
            _abort("An unexpected application error occurred", e)
        except FileNotFoundError as e:
            _abort("A required file was not found", e)
        except Exception as e:
            _abort("An unexpected error occurred", e)
    return wrapper


def get_paths(config_file: str, workdir: str = None):
    """Get absolute config path and project directory"""
    abs_cfg = Path(config_file).resolve()
    if workdir:
        project = Path(workdir).resolve()
        logging.info(f"Using custom workdir: {project}")
    else:
        project = abs_cfg.parent
        logging.debug(f"Using config directory as workdir: {project}")
    return abs_cfg, project


@handle_errors
def do_run(config_file: str, stages: tuple, env_id: str, workdir: str, output: str):
    """Execute run command"""
    abs_cfg, project = get_paths(config_file, workdir)
    config = Config(abs_cfg)

    output_dir = Path(output or config.output)
    if not output_dir.is_absolute():
        output_dir = project / output_dir

    context = PluginContext(
        project_path=project,
        env_id=env_id or config.env_id,
        output_dir=output_dir,
    )
    plugin = create_plugin(config, context)
    asyncio.run(plugin.run(stages or constants.DEFAULT_STAGES))
    logging.info(f"Lifecycle finished in state '{plugin.state.value}'")


@handle_errors
def do_inputs(config_file: str):
    """Execute inputs command"""
    config = Config(Path(config_file).resolve())
    click.echo(yaml.safe_dump(config.inputs.to_inputs(), default_flow_style=False, sort_keys=False), nl=False)


@handle_errors
def do_pipeline(env_id: str, archive_url: str, repo: str, ref: str, config_file: str, output: str):
    """Execute pipeline command"""
    kwargs = {"env_id": env_id, "archive_url": archive_url, "repository": repo, "config_file": config_file}
    if ref:
        kwargs["ref"] = ref
    content = dump_pipeline(build_spec(**kwargs))
    if output:
        Path(output).write_text(content, encoding="utf-8")
        logging.info(f"Pipeline written to '{output}'")
    else:
        click.echo(content, nl=False)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'plugin=DEBUG,proc=INFO')")
@click.option('-f', '--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='ssrdeploy')
@click.pass_context
def cli(ctx, debug, log_levels, log_file):
    """SSR Deploy - Build and deploy SSR applications as routed functions

    \b
    Examples:
      ssrdeploy run ssrdeploy.yml                  Run init, build, compile, deploy
      ssrdeploy run ssrdeploy.yml init build       Run selected stages in order
      ssrdeploy pipeline --env-id dev --repo URL   Render the CI pipeline
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, log_levels, log_file)


@cli.command()
@click.argument('config_file', shell_complete=complete_config_files)
@click.argument('stages', nargs=-1, type=click.Choice([stage.value for stage in constants.Stage]))
@click.option('-e', '--env-id', envvar=constants.ENV_ID_ENV, help='Target environment identifier')
@click.option('-w', '--workdir', help='Project directory (default: config file directory)')
@click.option('-o', '--output', help='Local deploy output directory')
@click.pass_context
def run(ctx, config_file, stages, env_id, workdir, output):
    """Run lifecycle stages for the project in CONFIG_FILE"""
    do_run(config_file, stages, env_id, workdir, output)


@cli.command()
@click.argument('config_file', shell_complete=complete_config_files)
@click.pass_context
def inputs(ctx, config_file):
    """Print the resolved plugin inputs"""
    do_inputs(config_file)


@cli.command()
@click.option('-e', '--env-id', required=True, envvar=constants.ENV_ID_ENV, help='Target environment identifier')
@click.option('--archive-url', help='Fetch source from this archive URL')
@click.option('--repo', help='Fetch source by cloning this repository')
@click.option('--ref', help='Git reference to clone (with --repo)')
@click.option('-c', '--config-file', default=constants.DEFAULT_CONFIG_FILENAME, show_default=True,
              help='Project file used inside the pipeline')
@click.option('-o', '--output', help='Write the pipeline to this file instead of stdout')
@click.pass_context
def pipeline(ctx, env_id, archive_url, repo, ref, config_file, output):
    """Render the CI pipeline that fetches, logs in, deploys and logs out"""
    do_pipeline(env_id, archive_url, repo, ref, config_file, output)
