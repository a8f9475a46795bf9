"""Serverless entry point: the ASGI app wrapped for AWS Lambda / Vercel."""
from mangum import Mangum

from todo_api.main import app

# Tables are created by the deploy step, not on every cold start
handler = Mangum(app, lifespan="off")
