"""Vercel Serverless Function: revert a finalized event (POST eventId)."""

from society.handlers import FunctionHandler, handle_unfinalize_event


class handler(FunctionHandler):
    operation = staticmethod(handle_unfinalize_event)
