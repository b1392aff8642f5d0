# paint.py - local mode: one in-process session on the controlling terminal
# - mouse paints, the bottom strip picks colours/tips/modes, q/esc quits
# - logs go to a file because curses owns the screen
import argparse
import curses
import logging
import os

import screen
from session import Outcome, Session

logger = logging.getLogger(__name__)

LOG_FILE = os.getenv('PAINT_LOG_FILE', 'paint.log')


def parse_args():
    ap = argparse.ArgumentParser(description="Paint - terminal canvas")
    ap.add_argument("--export-dir", default=None, help="Where 'save' writes N.txt (default $PAINT_EXPORT_DIR or images)")
    ap.add_argument("--log-file", default=LOG_FILE, help="Log file")
    return ap.parse_args()


def run(stdscr, args):
    screen.setup(stdscr)
    colors = screen.Colors()
    session = Session(export_dir=args.export_dir)
    session.handle(screen.size_event(stdscr))
    logger.info("session %s started (%dx%d)", session.id, *session.screen)
    try:
        while True:
            screen.draw(stdscr, session.render(), colors)
            for event in screen.read_events(stdscr, stdscr.getch()):
                outcome = session.handle(event)
                if outcome is Outcome.QUIT:
                    return
                if outcome is Outcome.SAVE_FAILED:
                    curses.beep()
    finally:
        screen.teardown()
        logger.info("session %s ended", session.id)


def main():
    args = parse_args()
    logging.basicConfig(
        filename=args.log_file,
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        curses.wrapper(lambda scr: run(scr, args))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
