import argparse

from crystalsort.demo import DemoConfig, PixelSortRunner
from crystalsort.logging import LOGGER, init_rerun

LOG_INTERVAL_DEFAULT = 1
LOG_INTERVAL_SELECT = 100
LOG_INTERVAL_INSERT = 25
LOG_INTERVAL_RENDER = 25

LOG_INTERVALS = {
    "crystal.select": LOG_INTERVAL_SELECT,
    "crystal.insert": LOG_INTERVAL_INSERT,
    "render.frame": LOG_INTERVAL_RENDER,
}


def configure_logging(*, rerun: bool = False, quiet: bool = False) -> None:
    LOGGER.configure_intervals(LOG_INTERVALS, default_interval=LOG_INTERVAL_DEFAULT)
    LOGGER.set_console(not quiet)
    if rerun:
        init_rerun(app_id="crystalsort-pixels")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crystalsort random pixel demo")
    parser.add_argument("--width", type=int, default=64, help="rows per column")
    parser.add_argument("--depth", type=int, default=32, help="number of columns")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--frames-dir", type=str, default=None, help="write img%%010d.png frames here")
    parser.add_argument("--frame-every", type=int, default=1)
    parser.add_argument("--rerun", action="store_true", help="stream frames and events to a rerun viewer")
    parser.add_argument("--quiet", action="store_true")
    return parser


def main() -> None:
    parser = _build_arg_parser()
    args = parser.parse_args()
    try:
        config = DemoConfig(
            width=args.width,
            depth=args.depth,
            seed=args.seed,
            frames_dir=args.frames_dir,
            frame_every=args.frame_every,
            rerun=args.rerun,
        )
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(rerun=args.rerun, quiet=args.quiet)
    final = PixelSortRunner(config).run()
    print(final.format())


if __name__ == "__main__":
    main()
