from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from typing import List, Optional

from .core.errors import KairosError
from .core.types import HolidayOccurrence


def _parse_ymd(s: str) -> date:
    try:
        y, m, d = map(int, s.split("-"))
        return date(y, m, d)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {s!r}") from None


def _context(args: argparse.Namespace):
    import kairos

    return kairos.get_context()


def _rules(ctx, args: argparse.Namespace):
    return ctx.locales.get_holidays(args.locale, args.set or "all")


def _line(occ: HolidayOccurrence) -> str:
    tag = "  (observed)" if occ.observed else ""
    return f"{occ.date.isoformat()}  {occ.name}{tag}"


def cmd_holidays(args: argparse.Namespace) -> int:
    ctx = _context(args)
    for occ in ctx.holiday_engine.holidays_for_year(args.year, _rules(ctx, args)):
        print(_line(occ))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    ctx = _context(args)
    found = ctx.holiday_engine.get_holidays(args.date, _rules(ctx, args))
    if not found:
        print(f"{args.date.isoformat()}: not a holiday")
        return 1
    for occ in found:
        print(_line(occ))
    return 0


def cmd_navigate(args: argparse.Namespace) -> int:
    ctx = _context(args)
    engine = ctx.holiday_engine
    step = engine.next_holiday if args.cmd == "next" else engine.previous_holiday
    occ = step(args.date, _rules(ctx, args))
    if occ is None:
        print(f"no holiday within {ctx.config.max_lookahead_years} years of {args.date.isoformat()}")
        return 1
    print(_line(occ))
    return 0


def cmd_easter(args: argparse.Namespace) -> int:
    import kairos

    print(kairos.easter(args.year, orthodox=args.orthodox).isoformat())
    return 0


def cmd_plugins(args: argparse.Namespace) -> int:
    import kairos

    reg = kairos.get_context().registry
    for name in reg.installed():
        p = reg.get_plugin(name)
        deps = f"  [needs: {', '.join(p.dependencies)}]" if p.dependencies else ""
        print(f"{p.name} {p.version}  {p.description}{deps}")
    return 0


def cmd_locales(args: argparse.Namespace) -> int:
    import kairos

    locales = kairos.get_context().locales
    for code in locales.available():
        mark = "*" if code == locales.current_code else " "
        print(f"{mark} {code}  {locales.get(code).name}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kairos", description="Holiday and date toolkit CLI.")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_hol = sub.add_parser("holidays", help="List the observed holidays of a year")
    p_hol.add_argument("year", type=int)
    p_hol.set_defaults(func=cmd_holidays)

    p_check = sub.add_parser("check", help="Is a date a holiday?")
    p_check.add_argument("date", type=_parse_ymd, help="YYYY-MM-DD")
    p_check.set_defaults(func=cmd_check)

    for name, text in (("next", "First holiday after a date"), ("previous", "Last holiday before a date")):
        p_nav = sub.add_parser(name, help=text)
        p_nav.add_argument("date", type=_parse_ymd, help="YYYY-MM-DD")
        p_nav.set_defaults(func=cmd_navigate)

    for sp in (p_hol, p_check, sub.choices["next"], sub.choices["previous"]):
        sp.add_argument("--locale", default=None, help="locale code, e.g. en-US")
        sp.add_argument("--set", default=None, help="holiday set or region, e.g. federal, TX")

    p_easter = sub.add_parser("easter", help="Easter Sunday of a year")
    p_easter.add_argument("year", type=int)
    p_easter.add_argument("--orthodox", action="store_true", help="Julian computus (Orthodox Easter)")
    p_easter.set_defaults(func=cmd_easter)

    sub.add_parser("plugins", help="List installed plugins").set_defaults(func=cmd_plugins)
    sub.add_parser("locales", help="List registered locales").set_defaults(func=cmd_locales)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (KairosError, KeyError, ValueError) as exc:
        print(f"kairos: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
