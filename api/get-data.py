"""Vercel Serverless Function: read players, events and ledger."""

from society.handlers import FunctionHandler, handle_get_data


class handler(FunctionHandler):
    operation = staticmethod(handle_get_data)
    allow_get = True
