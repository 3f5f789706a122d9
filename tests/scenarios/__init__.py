"""End-to-end scenarios for the response finalizer.

Each scenario runs handlers through the finalizer inside a FastAPI
application and checks what reaches the client.
"""
