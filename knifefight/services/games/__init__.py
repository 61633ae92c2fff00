"""Game domain services: rotation, placement, collision and game state.

This package contains the pure simulation core that HTTP routes and socket
handlers drive, keeping transport concerns separated from game mechanics.
Only ``scheduler`` knows about Flask and Socket.IO.
"""
