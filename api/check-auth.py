"""Vercel Serverless Function: check the admin password."""

from society.handlers import FunctionHandler, handle_check_auth


class handler(FunctionHandler):
    operation = staticmethod(handle_check_auth)
