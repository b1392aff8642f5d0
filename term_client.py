# term_client.py - Paint TTY client for the remote host
# - forwards terminal size, mouse and keys as JSON events
# - draws whatever frame the server sends back; the canvas lives server-side
import argparse
import asyncio
import curses
import json
import logging
import os

import websockets

import screen
from frame import from_wire
from session import event_to_dict

logger = logging.getLogger(__name__)

LOG_FILE = os.getenv('PAINT_LOG_FILE', 'paint.log')


def parse_args():
    ap = argparse.ArgumentParser(description="Paint TTY client")
    ap.add_argument("--ws", default="ws://localhost:23234/ws", help="WebSocket URL")
    ap.add_argument("--log-file", default=LOG_FILE, help="Log file")
    return ap.parse_args()


async def send(ws, event):
    await ws.send(json.dumps(event_to_dict(event)))


async def recv_loop(stdscr, ws, state):
    colors = screen.Colors()
    try:
        async for raw in ws:
            m = json.loads(raw)
            t = m.get("type")
            if t == "frame":
                screen.draw(stdscr, from_wire(m.get("rows", [])), colors)
            elif t == "saved":
                logger.info("save %s", "ok" if m.get("ok") else "failed")
                if not m.get("ok"): curses.beep()
            elif t == "quit":
                break
    except websockets.ConnectionClosed as e:
        logger.info("connection closed: %s", e)
    finally:
        state["done"] = True


async def main(stdscr, args):
    screen.setup(stdscr)
    stdscr.nodelay(True)
    state = {"done": False}
    try:
        async with websockets.connect(args.ws) as ws:
            await send(ws, screen.size_event(stdscr))
            reader = asyncio.create_task(recv_loop(stdscr, ws, state))
            while not state["done"]:
                k = stdscr.getch()
                if k == -1:
                    await asyncio.sleep(0.01); continue
                try:
                    for event in screen.read_events(stdscr, k):
                        await send(ws, event)
                except websockets.ConnectionClosed:
                    break
            await reader
    finally:
        screen.teardown()


def run():
    args = parse_args()
    logging.basicConfig(
        filename=args.log_file,
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        curses.wrapper(lambda scr: asyncio.run(main(scr, args)))
    except (OSError, websockets.InvalidURI, websockets.InvalidHandshake) as e:
        logger.error("Could not connect to %s: %s", args.ws, e)
        print(f"paint-client: could not connect to {args.ws}: {e}")
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
