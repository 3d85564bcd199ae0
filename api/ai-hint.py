"""
api/ai-hint.py

Serverless entrypoint. The hosting platform routes ``/api/ai-hint`` to this
file and serves the ASGI ``app`` below; everything else lives in ``ode_tutor``.
"""

from ode_tutor.main import create_hosted_app

app = create_hosted_app()
