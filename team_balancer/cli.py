"""Command line interface for Team Balancer."""

import click
import logging
import random
import sys
import sqlite3 as sql
from pathlib import Path

import yaml

import team_balancer.db as db
from team_balancer.balancer import TeamBalancer
from team_balancer.config import DEFAULT_MAX_DELTA, Config
from team_balancer.exceptions import BalanceError, RosterError
from team_balancer.models import Constraints, TeamResult
from team_balancer.roster import load_roster


def parse_minimums(values: tuple[str, ...]) -> dict[str, int]:
  """Parse TAG=COUNT pairs into a position minimums mapping."""
  minimums = {}
  for value in values:
    tag, sep, count = value.partition("=")
    tag = tag.strip().lower()
    if not sep or not tag:
      raise click.BadParameter(f"expected TAG=COUNT, got {value!r}", param_hint="--min")
    try:
      minimums[tag] = int(count)
    except ValueError:
      raise click.BadParameter(f"count for {tag!r} must be an integer, got {count!r}", param_hint="--min")
    if minimums[tag] < 0:
      raise click.BadParameter(f"count for {tag!r} cannot be negative", param_hint="--min")
  return minimums

def format_teams(result: TeamResult) -> list[str]:
  """Render both teams side by side with numbered rows and score lines."""
  width = max([len(p.name) for p in result.side_a] + [len("Team A")]) + 6
  lines = [f"{'Team A':<{width}}Team B"]
  for i, (a, b) in enumerate(zip(result.side_a, result.side_b), start=1):
    lines.append(f"{f'{i}. {a.name}':<{width}}{i}. {b.name}")
  lines.append(f"{f'Score: {result.score_a:g}':<{width}}Score: {result.score_b:g}")
  lines.append(f"{f'Rating: {result.rating_a:g}':<{width}}Rating: {result.rating_b:g}")
  return lines

def is_number(value) -> bool:
  return isinstance(value, (int, float)) and not isinstance(value, bool)

def is_minimums(value) -> bool:
  return isinstance(value, dict) and all(
    isinstance(tag, str) and isinstance(count, int) and not isinstance(count, bool) and count >= 0
    for tag, count in value.items()
  )

def recall(remembered: dict, key: str, default, is_valid):
  """Return a remembered setting, or default if it is missing or the wrong shape."""
  if key not in remembered:
    return default
  value = remembered[key]
  if not is_valid(value):
    click.secho(f"Ignoring remembered {key}: {value!r}", fg="yellow")
    return default
  return value

def load_or_exit(source):
  try:
    loaded = load_roster(source)
  except (FileNotFoundError, RosterError) as e:
    click.secho(f"Error: {e}", fg="red")
    sys.exit(1)

  for error in loaded.skipped:
    click.secho(f"Skipped {error}", fg="yellow")
  return loaded.players

@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
  """Team Balancer CLI for splitting a roster into two even teams."""
  if verbose:
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

@cli.command()
@click.argument("db_file", type=click.Path(path_type=Path))
def init(db_file: Path):
  """Initialize the settings database."""
  if db_file.exists():
    db_file.unlink()

  with sql.connect(db_file) as conn:
    db.truncate_settings(conn)
    click.secho(f"Initialized settings database {db_file}", fg="green")

@cli.command()
@click.argument("source")
def roster(source: str):
  """List the attending players from a roster CSV or sheet URL."""
  players = load_or_exit(source)

  click.secho(f"Participating players: ({len(players)})", fg="blue")
  for player in players:
    lock = {True: "A", False: "B"}.get(player.fixed_side, "")
    positions = "/".join(player.position_tags or ())
    click.echo(
      f"  {player.name:<28} {player.rating:>5g}  {'F' if player.female else 'M'}  {lock:<1}  {positions}"
    )

@cli.command()
@click.argument("source", required=False)
@click.option("--config", "config_file", type=click.Path(exists=True, path_type=Path),
              help="YAML configuration file")
@click.option("--db", "db_file", type=click.Path(path_type=Path),
              help="Settings database to remember the last run in")
@click.option("--delta", type=float, help="Maximum rating difference between teams")
@click.option("--min", "minimums", multiple=True, help="Minimum players per team with a position, as TAG=COUNT")
@click.option("--trials", type=int, help="Number of random splits to try")
@click.option("--seed", type=int, help="Seed for a repeatable split")
@click.option("--sort/--no-sort", default=True, help="Sort each team alphabetically")
@click.option("--output", type=click.Path(path_type=Path), help="Save teams to a .yaml or .csv file")
def generate(source, config_file, db_file, delta, minimums, trials, seed, sort, output):
  """Generate two balanced teams."""
  config = Config()
  if config_file:
    try:
      config.load_from_file(config_file)
    except (ValueError, yaml.YAMLError) as e:
      click.secho(f"Error: invalid config {config_file}: {e}", fg="red")
      sys.exit(1)

  remembered = {}
  if db_file:
    with sql.connect(db_file) as conn:
      db.ensure_settings(conn)
      remembered = db.load_settings(conn)

  source = source or config.roster_source or recall(
    remembered, "roster.source", None, lambda value: isinstance(value, str) and bool(value.strip())
  )
  if not source:
    click.secho("Error: no roster source given", fg="red")
    sys.exit(1)

  if delta is None:
    delta = config.max_delta if config_file else recall(remembered, "teams.max_delta", DEFAULT_MAX_DELTA, is_number)
  if minimums:
    min_positions = parse_minimums(minimums)
  elif config_file:
    min_positions = config.min_positions
  else:
    min_positions = recall(remembered, "teams.min_positions", {}, is_minimums)
  trials = trials if trials is not None else config.max_trials

  players = load_or_exit(source)
  click.secho(f"Balancing {len(players)} players (max delta {delta:g})", fg="blue")

  try:
    balancer = TeamBalancer(
      Constraints(delta, dict(min_positions)),
      max_trials=trials,
      rng=random.Random(seed) if seed is not None else None,
    )
    result = balancer.search(players)
  except BalanceError as e:
    click.secho(f"Error: {e}", fg="red")
    sys.exit(1)

  if sort:
    result = result.sorted()

  for line in format_teams(result):
    click.echo(line)
  click.secho(f"Found teams after {result.trials} attempts (delta {result.delta:g})", fg="green")

  if output:
    if output.suffix.lower() == ".csv":
      balancer.save_teams_csv(result, output)
    else:
      balancer.save_teams_yaml(result, output)
    click.secho(f"Saved teams to {output}", fg="green")

  if db_file:
    with sql.connect(db_file) as conn:
      db.save_setting(conn, "roster.source", str(source))
      db.save_setting(conn, "teams.max_delta", delta)
      db.save_setting(conn, "teams.min_positions", dict(min_positions))

@cli.command()
@click.argument("db_file", type=click.Path(exists=True, path_type=Path))
@click.option("--forget", multiple=True, help="Remove a remembered setting")
def settings(db_file: Path, forget: tuple[str, ...]):
  """Show remembered settings."""
  with sql.connect(db_file) as conn:
    db.ensure_settings(conn)
    for key in forget:
      db.delete_setting(conn, key)
      click.secho(f"Forgot {key}", fg="yellow")

    stored = db.load_settings(conn)

  if not stored:
    click.secho("No settings remembered yet.", fg="blue")
  for key, value in stored.items():
    click.echo(f"{key} = {value}")

if __name__ == "__main__":
  cli()
