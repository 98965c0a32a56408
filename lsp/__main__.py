#!/usr/bin/env python3
# Entry point for LSP server: python3 -m lsp

import logging

from lsp.server import server

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    server.start_io()
