#!/usr/bin/env python3
"""Command line for the sales import pipeline.

Examples:
    Inspect a file's columns:
        finboard detect ./vendas.xlsx

    Import into a JSON store, fixing one column by hand:
        finboard import ./vendas.xlsx --store ./data/finboard.json \\
            --map gross_value="Valor Vendas" --map net_value="Total Recebido"

    Daily sheet -> PushinPay sheet:
        finboard convert ./vendas-diarias.xlsx --out ./pushinpay.xlsx

    Download a template:
        finboard example daily --out ./exemplo.xlsx
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from finboard_core.config import ImportSettings, SplitMode
from finboard_core.converter import EXAMPLES, convert_with_diagnostics, example_workbook
from finboard_core.exceptions import FinboardError
from finboard_core.importer import import_file, preview_rows
from finboard_core.schema import detect_schema
from finboard_core.store import JsonStore, append_sales
from finboard_core.tables import header_labels, read_table, write_csv, write_workbook

logger = logging.getLogger(__name__)


def _parse_overrides(items: Sequence[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for item in items:
        role, sep, label = item.partition("=")
        if not sep or not role.strip():
            raise argparse.ArgumentTypeError(f"Expected role=Header, got {item!r}")
        out[role.strip()] = label.strip().strip('"')
    return out


def cmd_detect(args: argparse.Namespace) -> int:
    table = read_table(args.input)
    detection = detect_schema(header_labels(table))
    print(f"schema: {detection.schema.value}")
    for role, match in detection.matches.items():
        extra = f" (candidates: {', '.join(match.candidates)})" if len(match.candidates) > 1 else ""
        print(f"  {role:<12} {match.outcome.value:<9} {match.label or '-'}{extra}")
    for row in preview_rows(table, args.preview):
        print("  | " + " | ".join(row))
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    settings = ImportSettings(strict=args.strict, split_mode=SplitMode(args.split))
    result = import_file(args.input, overrides=_parse_overrides(args.map) or None, settings=settings)
    for d in result.diagnostics:
        logger.warning("Linha %d: %s", d.row_index + 1, d.message)
    if args.store:
        append_sales(JsonStore(args.store), result.sales)
    else:
        json.dump([s.to_dict() for s in result.sales], sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    if not result.sales:
        logger.warning("Nenhuma venda válida encontrada no arquivo.")
        return 1
    logger.info("%d vendas importadas com sucesso.", result.imported)
    return 0


def cmd_convert(args: argparse.Namespace) -> int:
    result = convert_with_diagnostics(read_table(args.input), SplitMode(args.split))
    out: Path = args.out
    if out.suffix.lower() == ".csv":
        write_csv(result.table, out)
    else:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(write_workbook(result.table, sheet_name="PushinPay"))
    logger.info("Wrote %s (%d sales, %d rows skipped)", out, result.records, len(result.diagnostics))
    return 0


def cmd_example(args: argparse.Namespace) -> int:
    filename, payload = example_workbook(args.kind)
    out: Path = args.out or Path(filename)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(payload)
    logger.info("Wrote %s", out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="finboard", description="Import and convert sales spreadsheets")
    p.add_argument("--quiet", action="store_true", help="Less logging")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    d = sub.add_parser("detect", help="Show the detected layout and column mapping")
    d.add_argument("input", type=Path)
    d.add_argument("--preview", type=int, default=5, help="Data rows to print")
    d.set_defaults(func=cmd_detect)

    i = sub.add_parser("import", help="Import sales from a CSV/xlsx file")
    i.add_argument("input", type=Path)
    i.add_argument("--store", type=Path, help="JSON store to append to (stdout if omitted)")
    i.add_argument("--map", action="append", default=[], metavar="ROLE=HEADER",
                   help="Override a detected column, e.g. gross_value='Valor Vendas'")
    i.add_argument("--strict", action="store_true", help="Reject unparsable dates/amounts")
    i.add_argument("--split", choices=[m.value for m in SplitMode], default=SplitMode.DIVIDE.value)
    i.set_defaults(func=cmd_import)

    c = sub.add_parser("convert", help="Daily-sales sheet to PushinPay sheet")
    c.add_argument("input", type=Path)
    c.add_argument("--out", type=Path, required=True, help=".xlsx or .csv output")
    c.add_argument("--split", choices=[m.value for m in SplitMode], default=SplitMode.DIVIDE.value)
    c.set_defaults(func=cmd_convert)

    e = sub.add_parser("example", help="Write an example workbook")
    e.add_argument("kind", choices=sorted(EXAMPLES))
    e.add_argument("--out", type=Path)
    e.set_defaults(func=cmd_example)
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING if args.quiet else logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        return args.func(args)
    except argparse.ArgumentTypeError as e:
        logger.error("%s", e)
        return 2
    except (FinboardError, ValueError, OSError) as e:
        logger.error("Erro ao processar o arquivo: %s", e)
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
