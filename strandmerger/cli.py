#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for StrandMerger.

This module provides the main CLI entry point and all subcommands for
merging a master and a slave assembly into paired contigs.
"""

import logging
import sys
from pathlib import Path

import click
import yaml

from .version import __version__
from .config.schema import (
    TEMPLATES,
    apply_overrides,
    load_config,
    save_config_template,
    validate_config,
)


def setup_logging(output_dir: Path, config: dict, verbose: bool = False, quiet: bool = False):
    """Configure root logging to a file in ``output_dir`` and to stderr."""
    level_name = config['output']['logging']['level']
    if verbose:
        level_name = 'DEBUG'
    elif quiet:
        level_name = 'WARNING'

    logging.basicConfig(
        level=getattr(logging, level_name),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(output_dir / config['output']['logging']['log_file']),
            logging.StreamHandler()
        ],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    StrandMerger: block-guided merging of two genome assemblies

    Merges a master and a slave draft assembly into paired contigs, using
    pre-computed blocks of agreement between the two drafts.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='strandmerger_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t', type=click.Choice(TEMPLATES), default='default',
              help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ Configuration file created: {output}")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        cfg = load_config(Path(config_file))
    except yaml.YAMLError as e:
        click.echo(f"✗ Invalid YAML: {e}", err=True)
        sys.exit(1)

    errors = validate_config(cfg)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")
    merge = cfg['merge']
    click.echo("\nKey Settings:")
    click.echo(f"  Minimum alignment: {merge['min_alignment']} bp")
    click.echo(f"  Minimum homology: {merge['min_homology']}%")
    click.echo(f"  Gap limits (pctg/ctg): {merge['max_pctg_gap']}/{merge['max_ctg_gap']}")
    click.echo(f"  Threads: {cfg['execution']['threads']}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True), required=False)
@click.option('--format', '-f', 'fmt', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, fmt):
    """Display configuration settings (defaults if no file is given)."""
    cfg = load_config(Path(config_file) if config_file else None)

    if fmt == 'yaml':
        click.echo(yaml.dump(cfg, default_flow_style=False, sort_keys=False))
        return

    click.echo(f"Configuration from: {config_file or 'defaults'}")
    click.echo("=" * 60)
    for section in ('merge', 'execution'):
        click.echo(f"\n{section.capitalize()}:")
        for key, value in cfg[section].items():
            click.echo(f"  {key}: {value}")


# ============================================================================
# Merge Command
# ============================================================================

@main.command()
@click.option('--master', '-m', 'master_fasta', required=True, type=click.Path(exists=True),
              help='Master assembly contigs (FASTA, optionally gzipped)')
@click.option('--slave', '-s', 'slave_fasta', required=True, type=click.Path(exists=True),
              help='Slave assembly contigs (FASTA, optionally gzipped)')
@click.option('--blocks', '-b', 'blocks_file', required=True, type=click.Path(exists=True),
              help='Block table (TSV) describing chains of shared regions')
@click.option('--output', '-o', required=True, type=click.Path(),
              help='Output directory')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True),
              help='Configuration file (YAML)')
@click.option('--threads', '-t', type=int, default=None,
              help='Number of chains merged concurrently')
@click.option('--min-alignment', type=int, default=None,
              help='Minimum alignment length to merge contigs')
@click.option('--min-homology', type=float, default=None,
              help='Minimum alignment homology (percent)')
@click.option('--max-pctg-gap', type=int, default=None,
              help='Largest gap opened on the paired contig side')
@click.option('--max-ctg-gap', type=int, default=None,
              help='Largest gap opened on the merged contig side')
@click.option('--unmerged/--no-unmerged', default=None,
              help='Emit master contigs not in any chain as singleton paired contigs')
@click.pass_context
def merge(ctx, master_fasta, slave_fasta, blocks_file, output, config_file, threads,
          min_alignment, min_homology, max_pctg_gap, max_ctg_gap, unmerged):
    """Merge master and slave contigs into paired contigs."""
    from .assembly.pctg_chains import PctgChainMerger, add_unmerged_contigs, summarize_pctgs
    from .io.io_core_module import (
        BlockFormatError,
        load_contig_pool,
        read_blocks,
        write_paired_contigs,
        write_placements,
    )
    from .pctg.errors import PctgError
    from .pctg.frames import Assembly
    from .pctg.pctg_builder import PctgBuilder
    from .pctg.settings import MergeSettings

    cfg = load_config(Path(config_file) if config_file else None)
    cfg = apply_overrides(cfg, {
        'execution.threads': threads,
        'merge.min_alignment': min_alignment,
        'merge.min_homology': min_homology,
        'merge.max_pctg_gap': max_pctg_gap,
        'merge.max_ctg_gap': max_ctg_gap,
        'output.include_unmerged': unmerged,
    })
    errors = validate_config(cfg)
    if errors:
        for error in errors:
            click.echo(f"✗ {error}", err=True)
        sys.exit(1)

    output_dir = Path(output)
    output_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(output_dir, cfg, ctx.obj.get('VERBOSE', False), ctx.obj.get('QUIET', False))
    logger = logging.getLogger(__name__)
    logger.info(f"StrandMerger v{__version__}")

    try:
        master_pool = load_contig_pool(master_fasta, Assembly.MASTER)
        slave_pool = load_contig_pool(slave_fasta, Assembly.SLAVE)
        chains = read_blocks(blocks_file, master_pool, slave_pool)
    except (BlockFormatError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        sys.exit(1)

    builder = PctgBuilder(master_pool, slave_pool, settings=MergeSettings.from_config(cfg))
    merger = PctgChainMerger(
        builder,
        threads=cfg['execution']['threads'],
        on_error=cfg['execution']['on_error'],
    )

    try:
        result = merger.merge_chains(chains)
    except PctgError as e:
        logger.error(f"Merge aborted: {e}")
        sys.exit(1)

    if cfg['output']['include_unmerged']:
        add_unmerged_contigs(result, builder, master_pool)

    prefix = cfg['output']['prefix']
    fasta_path = output_dir / 'paired_contigs.fasta'
    write_paired_contigs(
        result.pctgs, fasta_path, master_pool.ref_vector, slave_pool.ref_vector,
        prefix=prefix, line_width=cfg['output']['line_width'],
    )
    if cfg['output']['write_placements']:
        write_placements(
            result.pctgs, output_dir / 'placements.tsv',
            master_pool.ref_vector, slave_pool.ref_vector, prefix=prefix,
        )

    stats = summarize_pctgs(result.pctgs)
    logger.info(
        f"{stats['count']} paired contigs, {stats['total_length']:,} bp, "
        f"longest {stats['longest']:,} bp, N50 {stats['n50']:,} bp"
    )
    if not ctx.obj.get('QUIET', False):
        click.echo(f"✓ Wrote {stats['count']} paired contigs to {fasta_path}")
        if result.failed:
            click.echo(f"  {len(result.failed)} chains skipped (see log)")


if __name__ == '__main__':
    main()
