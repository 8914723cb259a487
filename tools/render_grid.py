#!/usr/bin/env python3
# Render a generated level to a PNG preview using Pillow.
# Hidden exit cells are drawn as a dim outline so reviewers can see where the exit appears.

import argparse, os
from PIL import Image, ImageDraw
from lodegen.mapgen.generator import generate_level
from lodegen.tiles import EMPTY, BRICK, HARD, LADDER, POLE, TRAP, EXIT_LADDER, GOLD, HOLE

COLORS = {
    EMPTY: (10, 10, 26, 255),
    BRICK: (42, 58, 106, 255),
    HARD: (26, 42, 74, 255),
    TRAP: (52, 58, 106, 255),  # almost a brick: traps should not stand out
    LADDER: (0, 255, 255, 255),
    EXIT_LADDER: (0, 255, 255, 255),
    POLE: (102, 102, 170, 255),
    GOLD: (255, 0, 255, 255),
    HOLE: (0, 0, 0, 255),
}
START_COLOR = (0, 255, 136, 255)
ENEMY_COLOR = (255, 51, 68, 255)
EXIT_OUTLINE = (0, 120, 120, 255)

def _cell(draw, x, y, tile_size, margin, color, inset=0, outline=None):
    x0 = margin + x * tile_size + inset
    y0 = margin + y * tile_size + inset
    box = (x0, y0, x0 + tile_size - 1 - 2 * inset, y0 + tile_size - 1 - 2 * inset)
    if outline:
        draw.rectangle(box, outline=outline)
    else:
        draw.rectangle(box, fill=color)

def render_level(level, out_png, tile_size=16, margin=0):
    w = level.width * tile_size + 2 * margin
    h = level.height * tile_size + 2 * margin
    canvas = Image.new("RGBA", (w, h), COLORS[EMPTY])
    draw = ImageDraw.Draw(canvas)
    for y, row in enumerate(level.rows()):
        for x, tid in enumerate(row):
            color = COLORS.get(tid, (255, 255, 255, 255))
            if tid == LADDER:
                # rails + rungs
                _cell(draw, x, y, tile_size, margin, COLORS[EMPTY])
                x0, y0 = margin + x * tile_size, margin + y * tile_size
                draw.line((x0 + 3, y0, x0 + 3, y0 + tile_size - 1), fill=color)
                draw.line((x0 + tile_size - 4, y0, x0 + tile_size - 4, y0 + tile_size - 1), fill=color)
                for ry in range(y0 + 2, y0 + tile_size, 4):
                    draw.line((x0 + 3, ry, x0 + tile_size - 4, ry), fill=color)
            elif tid == POLE:
                y0 = margin + y * tile_size + 2
                draw.line((margin + x * tile_size, y0, margin + (x + 1) * tile_size - 1, y0), fill=color, width=2)
            elif tid == GOLD:
                _cell(draw, x, y, tile_size, margin, color, inset=tile_size // 4)
            elif tid != EMPTY:
                _cell(draw, x, y, tile_size, margin, color)
    for x, y in level.exit_ladders:
        _cell(draw, x, y, tile_size, margin, None, inset=1, outline=EXIT_OUTLINE)
    for x, y in level.enemy_spawns:
        _cell(draw, x, y, tile_size, margin, ENEMY_COLOR, inset=tile_size // 5)
    sx, sy = level.start
    _cell(draw, sx, sy, tile_size, margin, START_COLOR, inset=tile_size // 5)
    out_dir = os.path.dirname(out_png)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    canvas.save(out_png)
    return canvas

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=str, required=True, help="Seed code (e.g., ABC123)")
    ap.add_argument("--difficulty", type=str, default="normal")
    ap.add_argument("--levels", type=int, default=1, help="Render levels 1..N")
    ap.add_argument("--outdir", type=str, default="out/png", help="Where to write PNGs")
    ap.add_argument("--tile", type=int, default=16, help="Tile size in pixels")
    args = ap.parse_args()

    for lvl in range(1, args.levels + 1):
        level = generate_level(args.seed, args.difficulty, lvl)
        png = os.path.join(args.outdir, args.seed, f"{lvl:02d}.png")
        render_level(level, png, tile_size=args.tile)
    print(f"Wrote PNGs to {os.path.join(args.outdir, args.seed)}")

if __name__ == "__main__":
    main()
