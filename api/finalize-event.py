"""Vercel Serverless Function: finalize an event (POST eventId, scores, allEvents)."""

from society.handlers import FunctionHandler, handle_finalize_event


class handler(FunctionHandler):
    operation = staticmethod(handle_finalize_event)
