# src/flipforge/cli.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from pydantic import ValidationError

from flipforge.adapters.analysis_client import make_analysis_client
from flipforge.api.http import build_result_view
from flipforge.api.schemas import ResultView
from flipforge.domain.draft import Draft
from flipforge.domain.result import AnalyzeRequest, AnalyzeResult
from flipforge.services.draft_validator import highlight
from flipforge.services.session import DealSession, OutputSuppressedError

app = typer.Typer(help="FlipForge deal client (draft, analyze, explain, export).")


def _load_json(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"Cannot read {path}: {e}", err=True)
        raise typer.Exit(code=1) from e


def _load_result(path: Path) -> AnalyzeResult:
    try:
        return AnalyzeResult.model_validate(_load_json(path))
    except ValidationError as e:
        typer.echo(f"{path} is not a valid analysis result: {e.error_count()} error(s)", err=True)
        raise typer.Exit(code=1) from e


def _load_draft(path: Path) -> Draft:
    try:
        return Draft.model_validate(_load_json(path))
    except ValidationError as e:
        typer.echo(f"{path} is not a valid draft: {e.error_count()} error(s)", err=True)
        raise typer.Exit(code=1) from e


def _print_view(view: ResultView, as_json: bool) -> None:
    if as_json:
        typer.echo(view.model_dump_json(indent=2))
        return

    typer.echo(
        f"{view.shield.label} • Best strategy: {view.best_strategy} ({view.strategy_verdict})"
        f" • Confidence: {view.confidence}/100"
    )
    typer.echo(view.shield.subtitle)
    if view.conflict and view.explanation:
        typer.echo(view.explanation)
    typer.echo("  ".join(f"{m.label}: {m.text}" for m in view.metrics))
    typer.echo("")
    typer.echo("Why this verdict")
    for bullet in view.why_bullets:
        typer.echo(f"  - {bullet}")
    typer.echo("")
    typer.echo(f"Integrity Gate: {view.gate.status_line}")
    if view.notes:
        typer.echo("")
        typer.echo("Notes")
        for note in view.notes:
            typer.echo(f"  - {note}")


@app.command()
def analyze(
    purchase_price: float = typer.Option(..., help="Purchase price"),
    arv: float = typer.Option(..., help="After-repair value"),
    rehab_budget: float = typer.Option(..., help="Rehab budget"),
    rent: Optional[float] = typer.Option(None, help="Estimated monthly rent"),
    region: Optional[str] = typer.Option(None, help="Region hint for the service"),
    as_json: bool = typer.Option(False, "--json", help="Print the view as JSON"),
) -> None:
    """
    Analyze a manually entered deal.
    """
    session = DealSession(make_analysis_client())
    request = AnalyzeRequest(
        purchase_price=purchase_price,
        arv=arv,
        rehab_budget=rehab_budget,
        est_monthly_rent=rent,
        region=region,
    )
    result = session.analyze_manual(request)
    if result is None:
        typer.echo(session.analyze_error, err=True)
        raise typer.Exit(code=1)
    _print_view(build_result_view(result), as_json)


@app.command()
def draft(
    url: str = typer.Argument(..., help="Listing URL"),
    output: Optional[Path] = typer.Option(None, help="Write the draft JSON here"),
) -> None:
    """
    Ask the service to draft a deal from a listing URL.
    """
    session = DealSession(make_analysis_client())
    d = session.fetch_draft(url)
    if d is None:
        typer.echo(session.draft_error, err=True)
        raise typer.Exit(code=1)

    payload = json.dumps(d.to_payload(), indent=2)
    if output is not None:
        output.write_text(payload, encoding="utf-8")
        logger.info("Draft written", path=str(output))
    else:
        typer.echo(payload)

    for name, state in session.field_highlights().items():
        if state != "ok":
            typer.echo(f"{name}: {state}", err=True)


@app.command()
def finalize(
    draft_path: Path = typer.Argument(..., help="Draft JSON (as written by `draft`)"),
    output: Optional[Path] = typer.Option(None, help="Write the result JSON here"),
    as_json: bool = typer.Option(False, "--json", help="Print the view as JSON"),
) -> None:
    """
    Finalize a (possibly edited) draft and analyze it.

    Exit code 2 means the draft is incomplete; nothing is sent until the
    required fields are valid.
    """
    d = _load_draft(draft_path)

    session = DealSession(make_analysis_client())
    session.draft = d
    result = session.finalize()
    if result is None:
        typer.echo(session.analyze_error, err=True)
        flagged = session.missing_fields or session.invalid_fields
        if flagged:
            for name in flagged:
                typer.echo(f"  missing: {name}", err=True)
            raise typer.Exit(code=2)
        raise typer.Exit(code=1)

    if output is not None:
        output.write_text(json.dumps(result.to_payload(), indent=2), encoding="utf-8")
    _print_view(build_result_view(result), as_json)


@app.command()
def check(
    draft_path: Path = typer.Argument(..., help="Draft JSON"),
) -> None:
    """
    Show per-field highlights for a draft without contacting the service.
    """
    d = _load_draft(draft_path)
    for name, state in highlight(d).items():
        typer.echo(f"{name}: {state}")


@app.command()
def explain(
    result_path: Path = typer.Argument(..., help="AnalyzeResult JSON"),
    as_json: bool = typer.Option(False, "--json", help="Print the view as JSON"),
) -> None:
    """
    Render the verdict view for a saved result (no network).
    """
    _print_view(build_result_view(_load_result(result_path)), as_json)


@app.command()
def export(
    result_path: Path = typer.Argument(..., help="AnalyzeResult JSON"),
    out_dir: Path = typer.Option(Path("."), "--out", help="Directory for the report"),
    draft_path: Optional[Path] = typer.Option(
        None, "--draft", help="Draft JSON the result was finalized from (deal values, assumptions)"
    ),
    listing_url: Optional[str] = typer.Option(None, help="Listing URL shown on the report"),
    address: Optional[str] = typer.Option(None, help="Property address shown on the report"),
    purchase_price: Optional[float] = typer.Option(None, help="Purchase price (overrides --draft)"),
    arv: Optional[float] = typer.Option(None, help="After-repair value (overrides --draft)"),
    rehab_budget: Optional[float] = typer.Option(None, help="Rehab budget (overrides --draft)"),
    rent: Optional[float] = typer.Option(None, help="Estimated monthly rent (overrides --draft)"),
    holding_months: Optional[float] = typer.Option(None, help="Holding months (report only)"),
    interest_rate: Optional[float] = typer.Option(None, help="Interest rate % (report only)"),
    ltc: Optional[float] = typer.Option(None, help="Loan-to-cost % (report only)"),
) -> None:
    """
    Request the lender report PDF for a saved result.

    Deal values come from --draft when given; the individual value options
    override it. Financing assumptions fall back to the draft's, then to the
    configured defaults.
    """
    session = DealSession(make_analysis_client())
    session.result = _load_result(result_path)
    if draft_path is not None:
        session.draft = _load_draft(draft_path)
    session.listing_url = listing_url or ""
    session.manual_address = address or ""

    meta = session.export_meta(
        holding_months=holding_months,
        interest_rate_pct=interest_rate,
        ltc_pct=ltc,
    )
    overrides = {
        "purchase_price": purchase_price,
        "arv": arv,
        "rehab_budget": rehab_budget,
        "est_monthly_rent": rent,
    }
    meta = meta.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    try:
        path = session.export_lender_report(out_dir, meta)
    except OutputSuppressedError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=3) from e

    if path is None:
        typer.echo(session.export_error, err=True)
        raise typer.Exit(code=1)
    typer.echo(str(path))


if __name__ == "__main__":
    app()
