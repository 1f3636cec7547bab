"""
log_relay: HTTP endpoint for client-originated logs

Receives bytlog relay envelopes and replays them on the server console.
"""

from log_relay.api import app, run_server

__all__ = ['app', 'run_server']
__version__ = '1.0.1'
