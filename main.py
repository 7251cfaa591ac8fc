import json

import click

from cli_utils import JOB_HEADERS, job_rows, print_job_table, setup_logging
from config import Config, coerce_value
from wrapper import AtWrapper, JobAddError, JobNotFoundError


def _fail(ctx, message, code):
    click.echo(f"❌ {message}", err=True)
    ctx.exit(code)


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Config file (default: $ATWRAP_CONFIG or ~/.atwrap/config.json)")
@click.option("--binary", default=None, help="Path to the at binary")
@click.option("--no-escape", is_flag=True, help="Pass values to the shell unquoted")
@click.option("-v", "--verbose", is_flag=True)
@click.pass_context
def cli(ctx, config_path, binary, no_escape, verbose):
    try:
        cfg = Config(config_path)
    except json.JSONDecodeError as e:
        _fail(ctx, f"Malformed config file: {e}", 2)
    setup_logging(cfg.get("log_level"), verbose)
    at = AtWrapper.from_config(cfg)
    if binary:
        at.binary = binary
    if no_escape:
        at.set_escape(False)
    ctx.obj = {"config": cfg, "at": at}


@cli.command()
@click.argument("command")
@click.option("-t", "--time", "time_spec", required=True, help="Time spec, see `man at`")
@click.option("-q", "--queue", default=None, help="Queue letter a-z or A-Z")
@click.pass_context
def add(ctx, command, time_spec, queue):
    """Schedule COMMAND with at."""
    try:
        job = ctx.obj["at"].add_command(command, time_spec, queue)
    except ValueError as e:
        _fail(ctx, e, 2)
    except JobAddError as e:
        _fail(ctx, e, 3)
    click.echo(f"✅ Job {job.job_number} scheduled for {job.date}")


@cli.command("add-file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-t", "--time", "time_spec", required=True, help="Time spec, see `man at`")
@click.option("-q", "--queue", default=None, help="Queue letter a-z or A-Z")
@click.pass_context
def add_file(ctx, path, time_spec, queue):
    """Schedule the commands in PATH with at -f."""
    try:
        job = ctx.obj["at"].add_file(path, time_spec, queue)
    except ValueError as e:
        _fail(ctx, e, 2)
    except JobAddError as e:
        _fail(ctx, e, 3)
    click.echo(f"✅ Job {job.job_number} scheduled for {job.date}")


@cli.command("list")
@click.option("-q", "--queue", default=None, help="Only this queue")
@click.option("--json", "as_json", is_flag=True, help="One JSON object per line")
@click.pass_context
def list_jobs(ctx, queue, as_json):
    """List pending at jobs."""
    try:
        jobs = ctx.obj["at"].list_queue(queue)
    except ValueError as e:
        _fail(ctx, e, 2)
    if as_json:
        for job in jobs:
            click.echo(json.dumps(job.to_dict()))
        return
    if not jobs:
        click.echo("No jobs found.")
        return
    click.echo(print_job_table(JOB_HEADERS, job_rows(jobs)))


@cli.command()
@click.argument("job_numbers", nargs=-1, required=True, type=int)
@click.pass_context
def remove(ctx, job_numbers):
    """Remove one or more jobs by number."""
    missing = []
    for n in job_numbers:
        try:
            ctx.obj["at"].remove_job(n)
            click.echo(f"🗑️  Removed job {n}")
        except JobNotFoundError as e:
            click.echo(f"❌ {e}", err=True)
            missing.append(n)
    if missing:
        ctx.exit(4)


@cli.command()
@click.argument("job_number", type=int)
@click.pass_context
def show(ctx, job_number):
    """Print the script at will run for JOB_NUMBER."""
    try:
        click.echo(ctx.obj["at"].job_content(job_number))
    except JobNotFoundError as e:
        _fail(ctx, e, 4)


@cli.group()
def config():
    """Show or change persistent settings."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx):
    cfg = ctx.obj["config"]
    click.echo(f"# {cfg.path}")
    for k, v in cfg.all().items():
        click.echo(f"{k}: {v}")


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx, key, value):
    v = coerce_value(value)
    try:
        ctx.obj["config"].set(key, v)
    except KeyError as e:
        _fail(ctx, e.args[0], 2)
    click.echo(f"✅ Set {key} = {v}")


if __name__ == '__main__':
    cli()
