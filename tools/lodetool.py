#!/usr/bin/env python3
import argparse, csv, logging, os, sys
from lodegen.config import DIFFICULTIES, difficulty_for, load_difficulties
from lodegen.grid import Grid
from lodegen.mapgen.generator import LevelGenerator
from lodegen.solver.checker import check_solvability

def write_tsv(rows, path, include_header=False):
    with open(path, 'w', newline='') as f:
        w = csv.writer(f, delimiter='\t')
        if include_header:
            w.writerow(list(range(len(rows[0]))))
        for r in rows:
            w.writerow(r)

def read_text_level(path):
    with open(path, encoding="utf-8") as f:
        return [line.rstrip("\n") for line in f if line.strip()]

def _generator(args):
    table = load_difficulties(args.difficulties) if args.difficulties else DIFFICULTIES
    return LevelGenerator(args.seed, difficulty_for(args.difficulty, table), args.level)

def cmd_emit(args):
    gen = _generator(args)
    snap = gen.generate()
    if args.out is None:
        print("\n".join(snap.as_text()))
    elif args.out.endswith(".tsv"):
        write_tsv(snap.rows(), args.out, include_header=args.header)
        print(f"Wrote {args.out}")
    else:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write("\n".join(snap.as_text()) + "\n")
        print(f"Wrote {args.out}")
    r = gen.report
    print(f"attempts={r.attempts} best={r.best_score:.3f} fallback={r.used_fallback}", file=sys.stderr)

def cmd_check(args):
    g = Grid.from_text(read_text_level(args.path), difficulty=args.difficulty)
    res = check_solvability(g)
    print(f"solvable={res.solvable} score={res.score:.3f} {res.debug}")
    return 0 if res.solvable else 1

def cmd_sweep(args):
    fallbacks = 0
    attempts = 0
    for i in range(args.count):
        args.seed = f"{args.prefix}{i}"
        gen = _generator(args)
        gen.generate()
        attempts += gen.report.attempts
        fallbacks += gen.report.used_fallback
    print(f"{args.count} seeds, {fallbacks} fallbacks, {attempts / max(1, args.count):.1f} attempts/seed")
    return 0

def main(argv=None):
    p = argparse.ArgumentParser(description="Generate and check levels")
    p.add_argument('-v', '--verbose', action='count', default=0)
    sub = p.add_subparsers(dest='cmd', required=True)

    def add_level_args(sp):
        sp.add_argument('--difficulty', type=str, default='normal')
        sp.add_argument('--level', type=int, default=1)
        sp.add_argument('--difficulties', type=str, default=None, help="JSON profile overrides")

    p1 = sub.add_parser('emit')
    p1.add_argument('--seed', type=str, required=True)
    add_level_args(p1)
    p1.add_argument('--out', type=str, default=None, help=".tsv for tile ids, anything else for text")
    p1.add_argument('--header', action='store_true')
    p1.set_defaults(func=cmd_emit)

    p2 = sub.add_parser('check')
    p2.add_argument('path', type=str)
    p2.add_argument('--difficulty', type=str, default='normal')
    p2.set_defaults(func=cmd_check)

    p3 = sub.add_parser('sweep')
    p3.add_argument('--count', type=int, default=50)
    p3.add_argument('--prefix', type=str, default='SWEEP')
    add_level_args(p3)
    p3.set_defaults(func=cmd_sweep)

    args = p.parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    if getattr(args, 'path', None) and not os.path.exists(args.path):
        p.error(f"no such file: {args.path}")
    return args.func(args) or 0

if __name__ == '__main__':
    sys.exit(main())
