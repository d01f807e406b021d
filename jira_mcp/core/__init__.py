"""Pure translation layer: ADF flattening, JQL building, response formatting.

Nothing here performs I/O, so every function can be tested without a
network or an MCP transport.
"""
