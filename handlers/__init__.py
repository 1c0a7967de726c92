"""
handlers/ - Presentation Layer
================================
MCP request handlers. Each handler receives a protocol request,
delegates to the Dispatcher or a Repository, and shapes the reply.
No business logic lives here.
"""
