#!/usr/bin/env python3
import asyncio, logging, sys
from config.logging_config import configure
from nodebot.services.server import NodeBotServer

def main() -> int:
    configure()
    server = NodeBotServer()
    try:
        return asyncio.run(server.run())
    except KeyboardInterrupt:
        logging.getLogger("main").info("graceful shutdown")
        return 0
    except OSError as e:
        logging.getLogger("main").error(f"Unable to start NodeBot Server: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
