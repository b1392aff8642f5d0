# app.py - Paint remote host: one private canvas per websocket connection
# - clients send decoded terminal events as JSON, get the rendered frame back
# - first message must be a resize (no terminal size, no session)
# - sessions share nothing; a disconnect simply drops its Session
# - CLI: --host/--port, --host-key/--host-cert (TLS, required unless --insecure),
#        --shutdown-timeout
import argparse
import json
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Dict, Optional

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.websockets import WebSocketDisconnect

import frame
from session import Outcome, ResizeEvent, Session, event_from_dict

logger = logging.getLogger(__name__)

HOST             = os.getenv('PAINT_HOST', 'localhost')
PORT             = int(os.getenv('PAINT_PORT', '23234'))
HOST_KEY         = os.getenv('PAINT_HOST_KEY', '.ssh/id_ed25519')
HOST_CERT        = os.getenv('PAINT_HOST_CERT', '')
SHUTDOWN_TIMEOUT = int(os.getenv('PAINT_SHUTDOWN_TIMEOUT', '30'))

INDEX = """Paint remote host

  WS /ws      one canvas per connection
              send {"type":"resize","w":W,"h":H} first, then
              {"type":"mouse","action":"press|release|motion","x":X,"y":Y}
              {"type":"key","key":"q"}
              receive {"type":"frame","rows":[[[char,fg,bg,bold,underline],...],...]}
                      {"type":"saved","ok":bool}  {"type":"quit"}
  GET /state  number of live sessions

Connect with: paint-client --ws ws://HOST:PORT/ws
"""


def frame_msg(session: Session) -> dict:
    return {"type": "frame", "rows": frame.to_wire(session.render())}


def make_app(export_dir:Optional[str]=None) -> FastAPI:
    clients: Dict[WebSocket, Session] = {}

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Paint host ready")
        yield
        logger.info("Stopping, closing %d session(s)", len(clients))
        for ws in list(clients):
            try: await ws.close(code=1001)
            except Exception as e: logger.warning("Could not close session: %s", e)
        clients.clear()

    app = FastAPI(lifespan=lifespan)
    app.state.clients = clients

    @app.get("/", response_class=PlainTextResponse)
    async def index():
        return INDEX

    @app.get("/state")
    async def state():
        return JSONResponse({"sessions": len(clients)})

    @app.websocket("/ws")
    async def ws_endpoint(ws: WebSocket):
        await ws.accept()
        peer = f"{ws.client.host}:{ws.client.port}" if ws.client else "?"
        try:
            first = event_from_dict(json.loads(await ws.receive_text()))
        except ValueError as e:
            logger.warning("%s: bad handshake: %s", peer, e)
            first = None
        except WebSocketDisconnect:
            return
        if not isinstance(first, ResizeEvent):
            logger.info("%s: rejected, no terminal size", peer)
            await ws.close(code=1008, reason="terminal required")
            return

        session = Session(export_dir=export_dir)
        session.handle(first)
        clients[ws] = session
        logger.info("%s: session %s opened (%dx%d), %d live", peer, session.id, *session.screen, len(clients))
        try:
            await ws.send_text(json.dumps(frame_msg(session)))
            while True:
                raw = await ws.receive_text()
                try:
                    event = event_from_dict(json.loads(raw))
                except ValueError as e:
                    logger.warning("session %s: %s", session.id, e)
                    continue
                outcome = session.handle(event)
                if outcome is Outcome.QUIT:
                    await ws.send_text(json.dumps({"type": "quit"}))
                    await ws.close()
                    break
                if outcome in (Outcome.SAVED, Outcome.SAVE_FAILED):
                    await ws.send_text(json.dumps({"type": "saved", "ok": outcome is Outcome.SAVED}))
                await ws.send_text(json.dumps(frame_msg(session)))
        except WebSocketDisconnect:
            pass
        finally:
            clients.pop(ws, None)
            logger.info("%s: session %s closed, %d live", peer, session.id, len(clients))
    return app


def main():
    ap = argparse.ArgumentParser(description="Paint remote host")
    ap.add_argument("--host", default=HOST, help="Bind host")
    ap.add_argument("--port", "-p", type=int, default=PORT, help="Bind port")
    ap.add_argument("--host-key", default=HOST_KEY, help="TLS private key file (default $PAINT_HOST_KEY or .ssh/id_ed25519)")
    ap.add_argument("--host-cert", default=HOST_CERT, help="TLS certificate (default: the key file, as combined PEM)")
    ap.add_argument("--insecure", action="store_true", help="Serve plain ws:// without a host key")
    ap.add_argument("--shutdown-timeout", type=int, default=SHUTDOWN_TIMEOUT, help="Seconds sessions get to finish on SIGINT/SIGTERM")
    ap.add_argument("--export-dir", default=None, help="Where 'save' writes N.txt")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    tls = {}
    if not args.insecure:
        cert = args.host_cert or args.host_key
        for path in (args.host_key, cert):
            if not os.path.isfile(path):
                logger.error("Could not start server: host key file %s not found", path)
                sys.exit(1)
        tls = {"ssl_keyfile": args.host_key, "ssl_certfile": cert}

    app = make_app(args.export_dir)
    logger.info("Starting Paint host on %s:%d%s", args.host, args.port, " (tls)" if tls else "")
    try:
        uvicorn.run(app, host=args.host, port=args.port,
                    timeout_graceful_shutdown=args.shutdown_timeout, **tls)
    except (OSError, ValueError) as e:
        logger.error("Could not start server: %s", e)
        sys.exit(1)
    logger.info("Paint host stopped")


if __name__ == "__main__":
    main()
