#!/usr/bin/env python3
"""
Workproof Command Line Interface

Issue and verify ledger-anchored proofs of authorship.

Usage:
    workproof issue work.png --title "Sunset" --creator alice --certificate-id C1 -o proof.json
    workproof verify proof.json --file work.png
    workproof fingerprint work.png
    workproof networks
    workproof probe polygon base
    workproof info
"""

import asyncio
import json
import sys
from pathlib import Path

import click

from workproof import __version__, __author__
from workproof.config import (
    ProofEngineSettings,
    build_orchestrator,
    build_registry,
    build_verifier,
    configure_logging,
)
from workproof.core.errors import MalformedProofError, ProofEngineError
from workproof.core.fingerprint import WorkMetadata, fingerprint_file
from workproof.core.orchestrator import IssueOptions, VerificationLevel
from workproof.ledger.networks import resolve_networks
from workproof.utils.helpers import format_timestamp_ms, truncate_hash


def _load_settings(ctx: click.Context) -> ProofEngineSettings:
    return ctx.obj["settings"]


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', default=None, help='Logging level (default from WORKPROOF_LOG_LEVEL)')
@click.pass_context
def main(ctx, log_level):
    """Workproof: ledger-anchored proofs of authorship"""
    settings = ProofEngineSettings()
    configure_logging(log_level or settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--title', '-t', required=True, help='Title of the work')
@click.option('--creator', '-c', required=True, help='Creator identifier')
@click.option('--collaborator', 'collaborators', multiple=True, help='Collaborator (repeatable)')
@click.option('--certificate-id', required=True, help='Certificate identifier')
@click.option('--network', '-n', default=None, help='Network to anchor on')
@click.option('--level', type=click.Choice([level.value for level in VerificationLevel]),
              default=VerificationLevel.BASIC.value, help='Verification level')
@click.option('--output', '-o', default=None, help='Write the proof to this file')
@click.option('--audit-output', default=None,
              help='Write issuance audit data (verification hash, Merkle root, anchor) to this file')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def issue(ctx, input_file, title, creator, collaborators, certificate_id,
          network, level, output, audit_output, verbose):
    """Issue a verification proof for a file."""
    settings = _load_settings(ctx)
    data = Path(input_file).read_bytes()
    metadata = WorkMetadata.create(title, creator, certificate_id, collaborators)
    options = IssueOptions(
        network_id=network or settings.default_network,
        verification_level=VerificationLevel(level),
    )

    try:
        orchestrator = build_orchestrator(settings, build_registry(settings))
        issuance = asyncio.run(orchestrator.issue(data, metadata, options))
    except (ProofEngineError, ValueError) as e:
        raise click.ClickException(str(e))

    proof = issuance.proof
    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(proof.to_json(), encoding="utf-8")
    else:
        click.echo(proof.to_json())

    if audit_output:
        audit_path = Path(audit_output)
        audit_path.parent.mkdir(parents=True, exist_ok=True)
        audit_path.write_text(json.dumps(issuance.audit_dict(), indent=2), encoding="utf-8")

    if verbose or output:
        anchor = issuance.anchor
        click.echo(click.style("✅ PROOF ISSUED", fg='green', bold=True), err=not output)
        click.echo(f"  File hash: {truncate_hash(proof.file_hash, 32)}", err=not output)
        click.echo(f"  Anchor: {anchor.kind.value} on {options.network_id} "
                   f"(block {anchor.block_number})", err=not output)
        if not proof.has_content_id:
            click.echo(click.style("  Content id: none (content store unavailable)", fg='yellow'),
                       err=not output)
        if output:
            click.echo(f"  Output: {output}")


@main.command()
@click.argument('proof_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--file', '-f', 'original_file', type=click.Path(exists=True, dir_okay=False),
              default=None, help='Original work to compare against')
@click.option('--batch-root', default=None, help='Independently known Merkle root')
@click.option('--leaf-hash', default=None, help='Verification hash of the work (required with --batch-root)')
@click.option('--leaf-index', default=0, help='Position of the work in its batch')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--json-output', '-j', is_flag=True, help='Output as JSON')
@click.pass_context
def verify(ctx, proof_file, original_file, batch_root, leaf_hash, leaf_index, verbose, json_output):
    """Verify a proof, optionally against the original file."""
    settings = _load_settings(ctx)
    document = Path(proof_file).read_text(encoding="utf-8")
    data = Path(original_file).read_bytes() if original_file else None

    try:
        verifier = build_verifier(settings)
    except ValueError as e:
        raise click.ClickException(str(e))

    try:
        result = verifier.verify_document(
            document, data, batch_root=batch_root, leaf_hash=leaf_hash, leaf_index=leaf_index
        )
    except MalformedProofError as e:
        if json_output:
            click.echo(json.dumps({"isValid": False, "errors": e.problems}, indent=2))
        else:
            click.echo(click.style("❌ MALFORMED PROOF", fg='red', bold=True))
            for problem in e.problems:
                click.echo(f"  {problem}")
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        if result.is_valid:
            click.echo(click.style("✅ VERIFICATION PASSED", fg='green', bold=True))
        else:
            click.echo(click.style("❌ VERIFICATION FAILED", fg='red', bold=True))
        click.echo(f"Confidence: {result.confidence}%")

        if verbose or not result.is_valid:
            for name, passed in result.checks.to_dict().items():
                click.echo(f"  {name}: {'PASS' if passed else 'FAIL'}")
        if verbose and data is None:
            click.echo("  (fileHashMatch assumed: no original file given)")

    sys.exit(0 if result.is_valid else 1)


@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
def fingerprint(input_file):
    """Print the SHA-256 file hash of a work."""
    data = Path(input_file).read_bytes()
    click.echo(f"{fingerprint_file(data)}  {input_file}")


@main.command()
@click.pass_context
def networks(ctx):
    """List supported networks."""
    settings = _load_settings(ctx)
    for network_id, network in resolve_networks(settings.rpc_urls).items():
        mode = "transaction" if settings.signer_accounts.get(network_id) else "block-reference"
        click.echo(f"{network_id:<10} chain {network.chain_id:<6} {mode:<16} {network.rpc_url}")


@main.command()
@click.argument('network_ids', nargs=-1)
@click.pass_context
def probe(ctx, network_ids):
    """Check that networks answer a head-block query."""
    settings = _load_settings(ctx)
    try:
        orchestrator = build_orchestrator(settings, build_registry(settings))
    except ValueError as e:
        raise click.ClickException(str(e))

    report = asyncio.run(orchestrator.probe_networks(network_ids or None))

    all_ok = True
    for network_id, outcome in report.items():
        if isinstance(outcome, str):
            all_ok = False
            click.echo(click.style(f"❌ {network_id}: {outcome}", fg='red'))
        else:
            click.echo(click.style(
                f"✅ {network_id}: block {outcome.block_number} "
                f"({format_timestamp_ms(outcome.block_timestamp * 1000)})",
                fg='green',
            ))

    sys.exit(0 if all_ok else 1)


@main.command()
def info():
    """Show Workproof version and information."""
    click.echo(f"""
Workproof: Ledger-Anchored Proofs of Authorship
===============================================

Version: {__version__}
Author: {__author__}

Description:
  Cryptographic proof that a work existed, attributed to a creator,
  no later than a given block of a public ledger.

Key Features:
  • SHA-256 content and metadata fingerprints
  • Merkle tree inclusion proofs
  • Ledger anchoring with block-reference fallback
  • HMAC-SHA256 or Ed25519 proof signatures
  • Confidence-scored verification

Networks:
  {', '.join(sorted(resolve_networks()))}
    """)


if __name__ == "__main__":
    main()
