"""Vercel Serverless Function: add a player to the roster."""

from society.handlers import FunctionHandler, handle_add_player


class handler(FunctionHandler):
    operation = staticmethod(handle_add_player)
