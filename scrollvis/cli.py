"""CLI entry point for the scroll visualization engine."""

import argparse
import json
import logging
from pathlib import Path

from scrollvis.config import load_config
from scrollvis.engine import ScrollVis
from scrollvis.loader import load_store


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Scroll-driven entity visualization")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    def add_datasets(p: argparse.ArgumentParser) -> None:
        p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
        p.add_argument("graph", type=Path, help="Graph dataset JSON (nodes + edges)")
        p.add_argument("hierarchy", type=Path, help="Hierarchy dataset JSON (source + links)")

    # render command
    render_parser = sub.add_parser("render", help="Render one PNG frame per section")
    add_datasets(render_parser)
    render_parser.add_argument(
        "--out", type=Path, default=Path("frames"),
        help="Output directory for the frames",
    )

    # stats command
    stats_parser = sub.add_parser("stats", help="Show what the datasets load into")
    add_datasets(stats_parser)

    # scroll command
    scroll_parser = sub.add_parser("scroll", help="Replay scroll offsets and print engine state")
    add_datasets(scroll_parser)
    scroll_parser.add_argument(
        "--section-height", type=float, default=800.0,
        help="Pixel height of each text section",
    )
    scroll_parser.add_argument(
        "--frame-ms", type=float, default=16.0,
        help="Milliseconds of render loop to run after each offset",
    )
    scroll_parser.add_argument("offsets", type=float, nargs="+", help="Scroll offsets in pixels")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return

    config = load_config(args.config)
    store = load_store(args.graph, args.hierarchy, config)

    if args.command == "stats":
        print(store.report)
        print(f"\nCategories ({len(store.categories())}):")
        for category in store.categories():
            print(f"  {category}: {len(store.edges_of_type(category))} relationships")
        if store.has_hierarchy:
            root = store.lookup(store.root().id)
            depth = max(store.node(i).depth for i in store.pre_order())
            print(f"\nHierarchy: root {root.name}, depth {depth}, {len(store.pre_order())} nodes")

    elif args.command == "render":
        from scrollvis.output.snapshot import render_sections

        engine = ScrollVis(store, config)
        paths = render_sections(engine, args.out)
        for p in paths:
            print(p)

    elif args.command == "scroll":
        from scrollvis.scroller import Scroller

        engine = ScrollVis(store, config)
        tops = [i * args.section_height for i in range(len(engine.machine))]
        scroller = Scroller(engine, tops)
        for offset in args.offsets:
            index, progress = scroller.scroll_to(offset)
            engine.frame(args.frame_ms)
            state = engine.snapshot()
            print(json.dumps({
                "offset": offset,
                "section": state["section"],
                "index": index,
                "progress": round(progress, 3),
                "simulation_running": state["simulation"]["running"],
                "pending_transitions": state["pending_transitions"],
            }))


if __name__ == "__main__":
    main()
