"""
Main CLI entry point for specref.

Provides the command-line interface using Click.
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click
import pydantic as _pydantic

import specref
import specref.config as config
import specref.config.sources as config_sources
import specref.constants as constants
import specref.references as references
import specref.skills as skills

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

# Exit status when a manifest cannot be parsed
EXIT_MANIFEST_ERROR = 2


def _configure_logging(settings: config.Settings, verbose: bool) -> None:
    """Send log records to stderr at the configured level."""
    level = _logging.DEBUG if verbose else getattr(_logging, settings.log_level)
    _logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=_sys.stderr,
    )


def _load_manifest_or_exit(path: _pathlib.Path, json_output: bool) -> skills.SkillsManifest:
    """Load a manifest, exiting with EXIT_MANIFEST_ERROR if it is invalid."""
    try:
        return skills.load_manifest(path)
    except skills.ManifestParseError as e:
        if json_output:
            _click.echo(_json.dumps({"error": str(e)}), err=True)
        else:
            _click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_MANIFEST_ERROR) from None


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(specref.__version__, "-v", "--version", prog_name="specref")
@_click.option(
    "--verbose",
    is_flag=True,
    help="Enable debug logging on stderr",
)
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool) -> None:
    """
    specref - check directive references and match skills.

    \b
    Examples:
        specref check-references docs/                 # Report broken @rule:/@persona:/@example: links
        specref check-references docs/ --json          # Same, machine-readable
        specref scan docs/                             # List every reference token
        specref match-skills "react testing" .skills.json --top 3
        specref manifest show .skills.json             # Show manifest entries and policy
        specref config show                            # Show effective configuration
    """
    try:
        settings = config.Settings()
    except (_pydantic.ValidationError, config_sources.ConfigFileError) as e:
        raise _click.ClickException(f"Invalid configuration: {e}") from e

    _configure_logging(settings, verbose)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# Reference Commands
# =============================================================================


@cli.command(name="check-references")
@_click.argument(
    "root",
    type=_click.Path(exists=True, file_okay=False, path_type=_pathlib.Path),
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def check_references_cmd(ctx: _click.Context, root: _pathlib.Path, json_output: bool) -> None:
    """Check that every reference under ROOT points at an existing file.

    Exits 0 when nothing is broken, 1 otherwise.
    """
    settings: config.Settings = ctx.obj["settings"]
    result = references.check_references(root, settings)

    if json_output:
        _click.echo(_json.dumps(result.to_dict(), indent=2))
    else:
        _click.echo(f"Checked {result.total_count} references in {root}")
        if result.ok:
            _click.echo("✓ All references resolve.")
        else:
            _click.echo(f"✗ Broken references ({result.broken_count}):")
            for ref in result.broken:
                _click.echo(f"  {ref.source_document}:{ref.line}  {ref.token}")

    if not result.ok:
        raise SystemExit(1)


@cli.command(name="scan")
@_click.argument(
    "root",
    type=_click.Path(exists=True, file_okay=False, path_type=_pathlib.Path),
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def scan_cmd(ctx: _click.Context, root: _pathlib.Path, json_output: bool) -> None:
    """List every reference token found under ROOT without resolving it."""
    settings: config.Settings = ctx.obj["settings"]
    cfg = settings.references
    found = list(
        references.scan(
            references.discover_documents(root, cfg),
            exclude_fenced_code=cfg.exclude_fenced_code,
        )
    )

    if json_output:
        _click.echo(_json.dumps({
            "references": [ref.to_dict() for ref in found],
            "count": len(found),
        }, indent=2))
        return

    if not found:
        _click.echo("No references found.")
        return

    _click.echo(f"References ({len(found)}):")
    _click.echo(f"{'Location':<40} {'Kind':<9} {'Path'}")
    _click.echo("-" * 70)
    for ref in found:
        location = f"{ref.source_document}:{ref.line}"
        _click.echo(f"{location:<40} {ref.kind.value:<9} {ref.raw_path or '-'}")


# =============================================================================
# Skill Commands
# =============================================================================


@cli.command(name="match-skills")
@_click.argument("query")
@_click.argument(
    "manifest_path",
    type=_click.Path(path_type=_pathlib.Path),
    default=constants.MANIFEST_FILE_NAME,
    required=False,
)
@_click.option(
    "--top",
    "top_n",
    type=int,
    default=None,
    help="Maximum number of skills to return (default from config)",
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def match_skills_cmd(
    ctx: _click.Context,
    query: str,
    manifest_path: _pathlib.Path,
    top_n: int | None,
    json_output: bool,
) -> None:
    """Rank the skills in MANIFEST_PATH (default .skills.json) by relevance to QUERY.

    Blocked skills are never listed. Exits 2 if the manifest is invalid.
    """
    settings: config.Settings = ctx.obj["settings"]
    matching = settings.matching
    manifest = _load_manifest_or_exit(manifest_path, json_output)

    entries = manifest.entries()
    if matching.load_local_content:
        entries = skills.attach_local_content(entries, manifest_path.parent)

    try:
        results = skills.match_manifest(
            query,
            manifest,
            top_n if top_n is not None else matching.default_top,
            entries=entries,
            weights=skills.MatchWeights(
                description=matching.description_weight,
                content=matching.content_weight,
            ),
            min_term_length=matching.min_term_length,
        )
    except skills.InvalidTopNError as e:
        raise _click.BadParameter(str(e), param_hint="'--top'") from e

    if json_output:
        _click.echo(_json.dumps([r.to_dict() for r in results], indent=2))
        return

    if not results:
        _click.echo("No matching skills.")
        return

    _click.echo(f"Matching Skills ({len(results)}):")
    _click.echo(f"{'Score':<8} {'Skill':<45} {'Matched terms'}")
    _click.echo("-" * 80)
    for r in results:
        terms = ", ".join(sorted(r.matched_terms)) or "-"
        _click.echo(f"{r.score:<8.3f} {r.skill_identifier:<45} {terms}")


@cli.group(name="manifest")
def manifest_group() -> None:
    """Skill manifest commands."""
    pass


@manifest_group.command(name="show")
@_click.argument(
    "manifest_path",
    type=_click.Path(path_type=_pathlib.Path),
    default=constants.MANIFEST_FILE_NAME,
    required=False,
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def manifest_show(manifest_path: _pathlib.Path, json_output: bool) -> None:
    """Show the entries and policy of MANIFEST_PATH (default .skills.json)."""
    manifest = _load_manifest_or_exit(manifest_path, json_output)

    if json_output:
        _click.echo(_json.dumps(manifest.to_dict(), indent=2))
        return

    entries = manifest.entries()
    _click.echo(f"Manifest: {manifest_path}")
    _click.echo(f"Skills ({len(entries)}):")
    _click.echo(f"{'Category':<12} {'Version':<10} {'Identifier'}")
    _click.echo("-" * 70)
    for entry in entries:
        _click.echo(f"{entry.category.value:<12} {entry.version:<10} {entry.identifier}")

    policy = manifest.policy
    _click.echo()
    _click.echo("Policy:")
    _click.echo(f"  Auto-install required: {'✓' if policy.auto_install_required else '✗'}")
    _click.echo(f"  Enforce blocked: {'✓' if policy.enforce_blocked else '✗'}")
    _click.echo(f"  Allow project override: {'✓' if policy.allow_project_override else '✗'}")


# =============================================================================
# Config Commands
# =============================================================================


@cli.group(name="config")
def config_group() -> None:
    """Configuration commands."""
    pass


@config_group.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option("--section", type=str, default=None, help="Show specific section only")
@_click.pass_context
def config_show(ctx: _click.Context, as_json: bool, section: str | None) -> None:
    """Show effective configuration from all sources.

    Unknown keys found in config files or SPECREF_* variables are listed
    after the configuration so typos are easy to spot.
    """
    import yaml as _yaml

    settings: config.Settings = ctx.obj["settings"]
    full_config = settings.to_dict()

    if section:
        if section not in full_config:
            raise _click.ClickException(f"Unknown section: {section}")
        full_config = {section: full_config[section]}

    if as_json:
        _click.echo(_json.dumps(full_config, indent=2))
        return

    _click.echo(_yaml.dump(full_config, default_flow_style=False, sort_keys=False).rstrip())

    unknown = settings.collect_unknown_keys()
    if unknown and not section:
        _click.echo()
        _click.echo("Unknown keys (ignored):")
        for key in sorted(unknown):
            _click.echo(f"  {key}")


@config_group.command(name="path")
@_click.option("--all", "show_all", is_flag=True, help="Show all paths even if not found")
def config_path(show_all: bool) -> None:
    """Show configuration file paths and their status."""
    paths = [
        ("User config", config_sources.get_user_config_path()),
        ("Project config", config_sources.get_project_config_path(config.find_project_root())),
    ]

    for name, path in paths:
        exists = path.exists()
        if exists or show_all:
            status = "✓" if exists else "✗"
            _click.echo(f"{status} {name}: {path}")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="specref")


if __name__ == "__main__":
    main()
